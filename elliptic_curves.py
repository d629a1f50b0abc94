#!/usr/bin/python3

# Courbes elliptiques y² = x³ + ax + b en coordonnées jacobiennes
# Une seule implémentation de point, paramétrée par le corps de la courbe :
# Fp pour SM2 et SM9-G1, Fp2 pour le twist SM9-G2

from gmpy2 import mpz

import u256
from fields import Fp, Fp2, PrimeField
from errors import InvalidPoint, PointDecodeError


def _element(field, value):
	if isinstance(value, (Fp, Fp2)):
		return value
	return field(value)


class ParamSet:
	# field: corps de base (PrimeField ou QuadraticField)
	# a, b: constantes de l'équation de la courbe
	# g: générateur du sous-groupe, en coordonnées affines
	# order: ordre du sous-groupe généré par g
	# cofactor: h = #E / order
	def __init__(self, field, a, b, g, order, cofactor=1, name=None):
		self.field = field
		self.a = _element(field, a)
		self.b = _element(field, b)
		self.g = (_element(field, g[0]), _element(field, g[1]))
		self.order = mpz(order)
		self.cofactor = mpz(cofactor)
		self.name = name


class CompressMode:
	COMPRESSED = 0    # 02/03 ‖ x
	UNCOMPRESSED = 1  # 04 ‖ x ‖ y
	MIXED = 2         # 06/07 ‖ x ‖ y


class PointJ:
	INFINITY = -1

	def __init__(self, curve, point=None):
		self.curve = curve
		field = curve.field
		if point is None:
			# générateur de la courbe
			self.x = curve.g.x
			self.y = curve.g.y
			self.z = curve.g.z
		elif point == PointJ.INFINITY:
			# représentant canonique de l'infini : (1, 1, 0)
			self.x = field.one
			self.y = field.one
			self.z = field.zero
		elif type(point) == tuple and len(point) == 2:
			self.x = _element(field, point[0])
			self.y = _element(field, point[1])
			self.z = field.one
		elif type(point) == tuple and len(point) == 3:
			self.x = _element(field, point[0])
			self.y = _element(field, point[1])
			self.z = _element(field, point[2])
		else:
			raise TypeError('point must be None, PointJ.INFINITY or a coordinate tuple')

	def is_zero(self):
		return self.z.is_zero()

	def __eq__(self, other):
		if isinstance(other, PointJ):
			if other.is_zero():
				return self.is_zero()
			if self.is_zero():
				return False
			# comparaison projective : x1·z2² = x2·z1² et y1·z2³ = y2·z1³
			z1z1 = self.z.square()
			z2z2 = other.z.square()
			u1 = self.x * z2z2
			u2 = other.x * z1z1
			s1 = self.y * z2z2 * other.z
			s2 = other.y * z1z1 * self.z
			return (u1 == u2) and (s1 == s2)
		return False

	def __hash__(self):
		if self.is_zero():
			return hash(None)
		return hash(self.affine())

	def _double(self):
		# Pas de test sur l'infini : z' = 2yz reste nul
		x1, y1, z1 = self.x, self.y, self.z
		if self.curve.dbl == 'a0':
			# M = 3x²
			t2 = x1.square().triple()
		elif self.curve.dbl == 'a-3':
			# M = 3(x - z²)(x + z²)
			t1 = z1.square()
			t2 = x1.sub(t1).mul(x1.add(t1)).triple()
		else:
			# M = 3x² + a·z⁴
			t2 = x1.square().triple().add(self.curve.a.mul(z1.square().square()))
		y3 = y1.double()
		z3 = y3.mul(z1)
		y3 = y3.square()
		t3 = y3.mul(x1)
		y3 = y3.square().halve()
		x3 = t2.square()
		t1 = t3.double()
		x3 = x3.sub(t1)
		t1 = t3.sub(x3).mul(t2)
		y3 = t1.sub(y3)
		return PointJ(self.curve, (x3, y3, z3))

	def double(self):
		if self.is_zero():
			return self
		return self._double()

	def double_x5(self):
		r = self.double()
		r = r.double()
		r = r.double()
		r = r.double()
		r = r.double()
		return r

	def _add_parts(self, other):
		# add-1998-cmo-2 ; renvoie aussi h et r pour détecter P = Q et P = -Q
		z1z1 = self.z.square()
		z2z2 = other.z.square()
		u1 = self.x.mul(z2z2)
		u2 = other.x.mul(z1z1)
		s1 = self.y.mul(other.z).mul(z2z2)
		s2 = other.y.mul(self.z).mul(z1z1)
		h = u2.sub(u1)
		r = s2.sub(s1)
		hh = h.square()
		hhh = h.mul(hh)
		v = u1.mul(hh)
		x3 = r.square().sub(hhh).sub(v.double())
		y3 = r.mul(v.sub(x3)).sub(s1.mul(hhh))
		z3 = self.z.mul(other.z).mul(h)
		return h, r, PointJ(self.curve, (x3, y3, z3))

	def add(self, other):
		if other.is_zero():
			return self
		if self.is_zero():
			return other
		h, r, s = self._add_parts(other)
		if h.is_zero():
			if r.is_zero():
				return self.double()
			return self.curve.zero()
		return s

	def _add_complete(self, other):
		# Même suite d'opérations quel que soit le cas ; le résultat est choisi par masques
		h, r, s = self._add_parts(other)
		d = self._double()
		hz = h.is_zero()
		rz = r.is_zero()
		res = s._select(d, hz & rz)
		res = res._select(self.curve.zero(), hz & (not rz))
		res = res._select(other, self.is_zero())
		res = res._select(self, other.is_zero())
		return res

	def _select(self, other, flag):
		return PointJ(self.curve, (self.x.select(other.x, flag), self.y.select(other.y, flag),
								self.z.select(other.z, flag)))

	def negate(self):
		return PointJ(self.curve, (self.x, self.y.neg(), self.z))

	def sub(self, other):
		return self.add(other.negate())

	def scalar_mul(self, k):
		"""[k]P pour 0 <= k < 2^256, entier ou U256.

		Échelle de Montgomery sur les 256 bits : échanges conditionnels et addition
		complète, la suite d'opérations du corps ne dépend pas des bits de k.
		"""
		if isinstance(k, tuple):
			if len(k) != 4:
				raise ValueError('scalar must be a 4-limb U256')
			limbs = k
		else:
			limbs = u256.from_int(k)
		if self.is_zero():
			return self.curve.zero()
		r0 = self.curve.zero()
		r1 = self
		for i in range(255, -1, -1):
			b = u256.bit(limbs, i)
			r0, r1 = cswap(r0, r1, b)
			r1 = r0._add_complete(r1)
			r0 = r0._double()
			r0, r1 = cswap(r0, r1, b)
		return r0

	def __add__(self, other):
		if isinstance(other, PointJ):
			return self.add(other)
		return NotImplemented

	def __sub__(self, other):
		if isinstance(other, PointJ):
			return self.sub(other)
		return NotImplemented

	def __neg__(self):
		return self.negate()

	def __mul__(self, other):
		if isinstance(other, PointJ):
			return NotImplemented
		return self.scalar_mul(other)

	def __rmul__(self, other):
		return self * other

	def copy(self):
		return PointJ(self.curve, (self.x, self.y, self.z))

	def to_affine(self):
		if self.is_zero():
			raise InvalidPoint('the point at infinity has no affine coordinates')
		zinv = self.z.inverse()
		zinv2 = zinv.square()
		return PointJ(self.curve, (self.x.mul(zinv2), self.y.mul(zinv2).mul(zinv), self.curve.field.one))

	# Obtenir les coordonnées affines
	def affine(self):
		p = self.to_affine()
		return p.x, p.y

	def is_valid(self):
		return not self.is_zero() and self.curve.contains(self)

	def is_valid_affine(self):
		return self.z.is_one() and self.curve.contains(self)

	def __repr__(self):
		if self.is_zero():
			return '∞'
		s = ''
		s += 'x: ' + str(self.x) + '; '
		s += 'y: ' + str(self.y) + '; '
		s += 'z: ' + str(self.z)
		return s


def cswap(p, q, flag):
	return p._select(q, flag), q._select(p, flag)


class EllipticCurveJ:  # Courbes elliptiques, implémentation avec les coordonnées jacobiennes
	def __init__(self, params):
		assert type(params) is ParamSet
		self.params = params
		self.field = params.field
		self.a = params.a
		self.b = params.b
		self.order = params.order
		self.cofactor = params.cofactor
		if self.a.is_zero():
			self.dbl = 'a0'
		elif self.a == self.field(-3):
			self.dbl = 'a-3'
		else:
			self.dbl = 'generic'
		self.g = PointJ(self, params.g)
		self.infinity = PointJ(self, PointJ.INFINITY)

	def zero(self):
		return self.infinity

	def point(self, x, y, z=None):
		if z is None:
			return PointJ(self, (x, y))
		return PointJ(self, (x, y, z))

	def clear_cofactor(self, point):
		# [h]P
		if self.cofactor == 1:
			return point
		return point * self.cofactor

	def contains(self, point):
		# y² = x³ + a·x·z⁴ + b·z⁶
		z2 = point.z.square()
		z4 = z2.square()
		z6 = z4.mul(z2)
		lhs = point.y.square()
		rhs = point.x.square().mul(point.x).add(self.a.mul(point.x).mul(z4)).add(self.b.mul(z6))
		return lhs == rhs

	def encoded_length(self, mode=CompressMode.UNCOMPRESSED):
		if mode == CompressMode.COMPRESSED:
			return 1 + self.field.nbytes
		return 1 + 2 * self.field.nbytes

	def point_to_bytes(self, point, mode=CompressMode.UNCOMPRESSED):
		x, y = point.affine()
		if mode == CompressMode.UNCOMPRESSED:
			return b'\x04' + x.to_bytes() + y.to_bytes()
		if not isinstance(self.field, PrimeField):
			raise ValueError('point compression needs a prime field')
		if mode == CompressMode.COMPRESSED:
			return (b'\x02', b'\x03')[y.is_odd()] + x.to_bytes()
		if mode == CompressMode.MIXED:
			return (b'\x06', b'\x07')[y.is_odd()] + x.to_bytes() + y.to_bytes()
		raise ValueError('unknown compression mode: ' + str(mode))

	def point_from_bytes(self, data):
		data = bytes(data)
		n = self.field.nbytes
		if len(data) == 0:
			raise PointDecodeError('empty point encoding')
		prefix = data[0]
		try:
			if prefix == 0x04 and len(data) == 1 + 2 * n:
				x = self.field.from_bytes(data[1:1 + n])
				y = self.field.from_bytes(data[1 + n:])
			elif prefix in (0x02, 0x03) and len(data) == 1 + n and isinstance(self.field, PrimeField):
				x = self.field.from_bytes(data[1:])
				y = self.y_from_x(x, prefix & 1)
			elif prefix in (0x06, 0x07) and len(data) == 1 + 2 * n and isinstance(self.field, PrimeField):
				x = self.field.from_bytes(data[1:1 + n])
				y = self.field.from_bytes(data[1 + n:])
				if y.is_odd() != bool(prefix & 1):
					raise PointDecodeError('parity bit does not match y')
			else:
				raise PointDecodeError('bad prefix or length (%d bytes)' % len(data))
		except PointDecodeError:
			raise
		except ValueError as e:
			raise PointDecodeError(str(e)) from e
		point = PointJ(self, (x, y))
		if not self.contains(point):
			raise PointDecodeError('point is not on the curve')
		return point

	def y_from_x(self, x, parity):
		rhs = x.square().mul(x).add(self.a.mul(x)).add(self.b)
		y = rhs.sqrt()
		if y.is_odd() != bool(parity):
			y = y.neg()
		if y.is_odd() != bool(parity):
			raise ValueError('no y with the requested parity')
		return y

	def __repr__(self):
		s = ''
		if self.params.name:
			s += self.params.name + '\n'
		s += 'a : ' + str(self.a) + '\n'
		s += 'b : ' + str(self.b) + '\n'
		s += 'g : ' + str(self.g) + '\n'
		s += 'ordre : ' + str(self.order) + '\n'
		return s
