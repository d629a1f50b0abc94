#!/usr/bin/python3

# Paramètres des courbes des standards GM/T 0003 (SM2) et GM/T 0044 (SM9)
# Les coordonnées sont données en hexadécimal big endian, comme dans les standards

import u256
from fields import PrimeField, QuadraticField, Fp2
import elliptic_curves as ec


def _h(s):
	return u256.from_hex(s)


def _fp2(field, hi, lo):
	# (coefficient de u, constante), dans l'ordre de publication
	return Fp2(field.base(_h(lo)), field.base(_h(hi)), field)


# === SM2 : y² = x³ - 3x + b sur Fp ===
sm2Field = PrimeField(_h('FFFFFFFE FFFFFFFF FFFFFFFF FFFFFFFF FFFFFFFF 00000000 FFFFFFFF FFFFFFFF'), 'sm2-p')

sm2Params = ec.ParamSet(sm2Field,
						-3,
						sm2Field(_h('28E9FA9E 9D9F5E34 4D5A9E4B CF6509A7 F39789F5 15AB8F92 DDBCBD41 4D940E93')),
						(sm2Field(_h('32C4AE2C 1F198119 5F990446 6A39C994 8FE30BBF F2660BE1 715A4589 334C74C7')),
						 sm2Field(_h('BC3736A2 F4F6779C 59BDCEE3 6B692153 D0A9877C C62A4740 02DF32E5 2139F0A0'))),
						u256.to_int(_h('FFFFFFFE FFFFFFFF FFFFFFFF FFFFFFFF 7203DF6B 21C6052B 53BBF409 39D54123')),
						1,
						'sm2')

sm2Curve = ec.EllipticCurveJ(sm2Params)

# === SM9 : courbe BN y² = x³ + 5 sur Fp, twist y² = x³ + 5u sur Fp2 = Fp[u]/(u² + 2) ===
sm9Field = PrimeField(_h('B6400000 02A3A6F1 D603AB4F F58EC745 21F2934B 1A7AEEDB E56F9B27 E351457D'), 'sm9-p')
sm9Field2 = QuadraticField(sm9Field, -2, 'sm9-p²')

# ordre commun de G1 et G2
n = u256.to_int(_h('B6400000 02A3A6F1 D603AB4F F58EC744 49F2934B 18EA8BEE E56EE19C D69ECF25'))

sm9g1Params = ec.ParamSet(sm9Field,
						0,
						5,
						(sm9Field(_h('93DE051D 62BF718F F5ED0704 487D01D6 E1E40869 09DC3280 E8C4E481 7C66DDDD')),
						 sm9Field(_h('21FE8DDA 4F21E607 63106512 5C395BBC 1C1C00CB FA602435 0C464CD7 0A3EA616'))),
						n,
						1,
						'sm9-g1')

sm9g2Params = ec.ParamSet(sm9Field2,
						0,
						sm9Field2(0, 5),
						(_fp2(sm9Field2,
							'85AEF3D0 78640C98 597B6027 B441A01F F1DD2C19 0F5E93C4 54806C11 D8806141',
							'37227552 92130B08 D2AAB97F D34EC120 EE265948 D19C17AB F9B7213B AF82D65B'),
						 _fp2(sm9Field2,
							'17509B09 2E845C12 66BA0D26 2CBEE6ED 0736A96F A347C8BD 856DC76B 84EBEB96',
							'A7CF28D5 19BE3DA6 5F317015 3D278FF2 47EFBA98 A71A0811 6215BBA5 C999A7C7')),
						n,
						# #E'(Fp2) = n(2p - n)
						2 * sm9Field.p - n,
						'sm9-g2')

sm9G1Curve = ec.EllipticCurveJ(sm9g1Params)
sm9G2Curve = ec.EllipticCurveJ(sm9g2Params)

G1 = sm9G1Curve.g
G2 = sm9G2Curve.g

gmCurves = {
	'sm2': sm2Curve,
	'sm9-g1': sm9G1Curve,
	'sm9-g2': sm9G2Curve,
}
