#!/usr/bin/python3

import pytest
import gmpy2
from gmpy2 import mpz

import u256
import elliptic_curves as ec
from elliptic_curves import CompressMode, PointJ
from errors import InvalidPoint, PointDecodeError
from fields import PrimeField
from gmparams import sm2Curve, sm9G1Curve, sm9G2Curve
from tests import singletest

# y² = x³ + 2x + 3 sur F97 : coefficient a quelconque, #E = 100, (3, 6) d'ordre 5
toyField = PrimeField(97)
toyCurve = ec.EllipticCurveJ(ec.ParamSet(toyField, 2, 3, (3, 6), 5, 20, 'toy'))

allCurves = [sm2Curve, sm9G1Curve, sm9G2Curve, toyCurve]
curveIds = ['sm2', 'sm9-g1', 'sm9-g2', 'toy']


def ref_add(P, Q, a, p):
	# addition affine de référence sur les entiers (None = infini)
	if P is None:
		return Q
	if Q is None:
		return P
	(x1, y1), (x2, y2) = P, Q
	if x1 == x2 and (y1 + y2) % p == 0:
		return None
	if x1 == x2:
		lam = (3 * x1 * x1 + a) * gmpy2.invert(2 * y1, p) % p
	else:
		lam = (y2 - y1) * gmpy2.invert(x2 - x1, p) % p
	x3 = (lam * lam - x1 - x2) % p
	return x3, (lam * (x1 - x3) - y1) % p


def ref_mul(k, P, a, p):
	R = None
	for i in range(k):
		R = ref_add(R, P, a, p)
	return R


def as_ints(point):
	if point.is_zero():
		return None
	x, y = point.affine()
	return mpz(int(x)), mpz(int(y))


def rescaled(point, lam):
	# même point, autre représentant jacobien
	lam = point.curve.field(lam)
	return PointJ(point.curve, (point.x * lam.square(), point.y * lam.square() * lam, point.z * lam))


def test_curve_selects_doubling_formula():
	singletest('c.dbl == "a-3"', c=sm2Curve)
	singletest('c.dbl == "a0"', c=sm9G1Curve)
	singletest('c.dbl == "a0"', c=sm9G2Curve)
	singletest('c.dbl == "generic"', c=toyCurve)


@pytest.mark.parametrize('curve', [sm2Curve, sm9G1Curve, toyCurve], ids=['sm2', 'sm9-g1', 'toy'])
def test_group_law_matches_reference(curve):
	p = curve.field.p
	a = mpz(int(curve.a))
	G = curve.g
	g = as_ints(G)
	assert as_ints(G.double()) == ref_add(g, g, a, p)
	P3 = G.double() + G
	assert as_ints(P3) == ref_mul(3, g, a, p)
	assert as_ints(P3 + P3.double()) == ref_mul(9, g, a, p)
	assert as_ints(G * 7) == ref_mul(7, g, a, p)
	assert as_ints(13 * G) == ref_mul(13, g, a, p)


@pytest.mark.parametrize('curve', allCurves, ids=curveIds)
def test_double_equals_add(curve):
	G = curve.g
	P3 = G.double() + G
	for P in (G, P3, rescaled(P3, 5)):
		singletest('P.double() == P + P', P=P)
		singletest('P.double().to_affine() == (P + P).to_affine()', P=P)
		singletest('(P + rescaled(P, 11)) == P.double()', P=P, rescaled=rescaled)
	singletest('G + G != G', G=G)
	singletest('G + G + G == G.double() + G', G=G)
	singletest('(G + G + G).double() == G.double().double() + G.double()', G=G)


@pytest.mark.parametrize('curve', allCurves, ids=curveIds)
def test_negation(curve):
	G = curve.g
	P = G.double() + G
	singletest('(P + (-P)).is_zero()', P=P)
	singletest('(P - P).is_zero()', P=P)
	singletest('(rescaled(P, 3) + P.negate()).is_zero()', P=P, rescaled=rescaled)
	singletest('P - G == G.double()', P=P, G=G)
	singletest('-(-P) == P', P=P)
	assert (-P).x == P.x and (-P).z == P.z


@pytest.mark.parametrize('curve', allCurves, ids=curveIds)
def test_infinity(curve):
	O = curve.zero()
	G = curve.g
	assert O.is_zero() and O.x.is_one() and O.y.is_one()
	assert PointJ(curve, PointJ.INFINITY) == O
	singletest('G + O == G and O + G == G', G=G, O=O)
	singletest('(O + O).is_zero() and O.double().is_zero()', O=O)
	singletest('(-O).is_zero()', O=O)
	singletest('O != G and G != O', G=G, O=O)
	assert repr(O) == '∞'
	with pytest.raises(InvalidPoint):
		O.to_affine()
	# n'importe quel représentant avec z = 0 est l'infini
	assert PointJ(curve, (curve.field.one.double(), curve.field.one, curve.field.zero)) == O


def test_double_x5():
	for curve in (sm2Curve, sm9G1Curve, sm9G2Curve):
		P = curve.g.double() + curve.g
		r = P
		for i in range(5):
			r = r.double()
		singletest('P.double_x5() == r', P=P, r=r)
	assert sm9G1Curve.zero().double_x5().is_zero()


def test_double_x5_matches_scalar():
	G = sm9G1Curve.g
	singletest('G.double_x5() == G * 32', G=G)


@pytest.mark.parametrize('curve', allCurves, ids=curveIds)
def test_scalar_boundaries(curve):
	G = curve.g
	O = curve.zero()
	singletest('(G * 0).is_zero()', G=G)
	singletest('G * 1 == G', G=G)
	singletest('G * 2 == G.double()', G=G)
	singletest('(O * 12345).is_zero()', O=O)
	singletest('(O * ((1 << 256) - 1)).is_zero()', O=O)
	singletest('G * u256.ONE == G', G=G, u256=u256)


def test_scalar_order():
	for curve in (sm2Curve, sm9G1Curve):
		G = curve.g
		n = int(curve.order)
		singletest('(G * n).is_zero()', G=G, n=n)
		singletest('G * (n - 1) == -G', G=G, n=n)
		singletest('G * (n + 1) == G', G=G, n=n)


def test_scalar_distributes():
	G = sm9G1Curve.g
	singletest('(G * 46) + (13 * G) == (G * 13) + (46 * G)', G=G)
	singletest('G * 4 == G + G + G + G', G=G)
	singletest('G * 4 != G + G + G + G + G', G=G)
	singletest('(G * 6) * 7 == G * 42', G=G)


def test_scalar_mul_accepts_u256():
	G = sm2Curve.g
	k = 0xC0FFEE1234567890ABCDEF
	assert G * u256.from_int(k) == G * k
	with pytest.raises(ValueError):
		G * -1
	with pytest.raises(ValueError):
		G * (1 << 256)
	with pytest.raises(ValueError):
		G.scalar_mul((1, 2, 3))


def test_ladder_survives_small_order_points():
	# le groupe jouet est petit : l'échelle rencontre P + P et P + (-P)
	G = toyCurve.g
	p = toyField.p
	g = as_ints(G)
	for k in (4, 5, 6, 10, 99, 101):
		assert as_ints(G * k) == ref_mul(k, g, mpz(2), p)
	assert (G * 5).is_zero()
	assert (G * 1000) == (G * 100) * 10


def test_validity():
	for curve in (sm2Curve, sm9G1Curve, sm9G2Curve, toyCurve):
		G = curve.g
		singletest('G.is_valid() and G.is_valid_affine()', G=G)
		P = G.double() + G
		singletest('P.is_valid() and not rescaled(G, 5).is_valid_affine()', P=P, G=G, rescaled=rescaled)
		singletest('P.to_affine().is_valid_affine()', P=P)
		singletest('not curve.zero().is_valid()', curve=curve)
	bad = PointJ(sm9G1Curve, (sm9G1Curve.g.x, sm9G1Curve.g.y + 1))
	assert not bad.is_valid()


def test_point_constructor():
	G = sm2Curve.g
	assert PointJ(sm2Curve) == G
	assert PointJ(sm2Curve, (int(G.x), int(G.y))) == G
	assert PointJ(sm2Curve, (G.x, G.y, 1)) == G
	assert sm2Curve.point(G.x, G.y) == G
	with pytest.raises(TypeError):
		PointJ(sm2Curve, (1, 2, 3, 4))
	assert G.copy() == G and G.copy() is not G
	assert hash(G) == hash(rescaled(G, 9))


@pytest.mark.parametrize('mode', [CompressMode.COMPRESSED, CompressMode.UNCOMPRESSED, CompressMode.MIXED])
@pytest.mark.parametrize('curve', [sm2Curve, sm9G1Curve], ids=['sm2', 'sm9-g1'])
def test_encoding_roundtrip(curve, mode):
	for P in (curve.g, curve.g.double() + curve.g):
		data = curve.point_to_bytes(P, mode)
		assert len(data) == curve.encoded_length(mode)
		Q = curve.point_from_bytes(data)
		assert Q == P and Q.is_valid_affine()


def test_encoding_layout():
	G = sm2Curve.g
	x, y = G.x.to_bytes(), G.y.to_bytes()
	assert sm2Curve.point_to_bytes(G) == b'\x04' + x + y
	assert sm2Curve.point_to_bytes(G, CompressMode.COMPRESSED) == (b'\x02', b'\x03')[G.y.is_odd()] + x
	assert sm2Curve.point_to_bytes(G, CompressMode.MIXED) == (b'\x06', b'\x07')[G.y.is_odd()] + x + y


def test_twist_encoding():
	P = sm9G2Curve.g.double()
	data = sm9G2Curve.point_to_bytes(P)
	assert len(data) == 1 + 128
	assert sm9G2Curve.point_from_bytes(data) == P
	with pytest.raises(ValueError):
		sm9G2Curve.point_to_bytes(P, CompressMode.COMPRESSED)
	with pytest.raises(PointDecodeError):
		sm9G2Curve.point_from_bytes(b'\x02' + data[1:65])


def test_encoding_infinity_rejected():
	with pytest.raises(InvalidPoint):
		sm2Curve.point_to_bytes(sm2Curve.zero())


def test_decode_errors():
	curve = sm2Curve
	G = curve.g
	good = curve.point_to_bytes(G)
	cases = [
		b'',
		b'\x00',
		good[:-1],
		good + b'\x00',
		b'\x05' + good[1:],
		b'\x04' + good[1:33] + (int(G.y) + 1).to_bytes(32, 'big'),
		b'\x04' + u256.to_bytes_be(curve.field.modulus) + good[33:],
		(b'\x07', b'\x06')[G.y.is_odd()] + good[1:],
	]
	for data in cases:
		with pytest.raises(PointDecodeError):
			curve.point_from_bytes(data)


def test_decode_compressed_non_residue():
	curve = sm2Curve
	x = curve.field(0)
	while True:
		rhs = x.square() * x + curve.a * x + curve.b
		if gmpy2.legendre(mpz(int(rhs)), curve.field.p) == -1:
			break
		x = x + 1
	with pytest.raises(PointDecodeError):
		curve.point_from_bytes(b'\x02' + x.to_bytes())


def test_decode_error_is_value_error():
	with pytest.raises(ValueError):
		sm9G1Curve.point_from_bytes(b'\x04')
