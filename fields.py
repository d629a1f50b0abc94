#!/usr/bin/python3

# Corps premiers Fp (éléments de 256 bits) et extension quadratique Fp2 = Fp[u]/(u² - β)
# Tous les éléments sont immuables et toujours sous forme canonique [0, p)

import gmpy2
from gmpy2 import mpz

import u256
from u256 import MASK64

MPZ_TYPE = type(mpz(0))


def montgomery_inv(p0):
	# x = -p0^{-1} mod 2^64, par itérations de Newton (chaque itération double la précision)
	x = 1
	for _ in range(6):
		x = (x * (2 - p0 * x)) & MASK64
	return (-x) & MASK64


class PrimeField:
	nbytes = 32

	def __init__(self, p, name=None):
		if isinstance(p, tuple):
			# module donné sous forme U256
			p = u256.to_int(p)
		self.p = mpz(p)
		if self.p < 3 or self.p % 2 == 0 or self.p.bit_length() > 256:
			raise ValueError('modulus must be an odd prime of at most 256 bits')
		self.name = name
		self.modulus = u256.from_int(self.p)
		self.pinv = montgomery_inv(self.modulus[0])
		# R = 2^256, R² mod p sert à sortir de la forme de Montgomery
		self.r2 = u256.from_int(gmpy2.powmod(2, 512, self.p))
		self.zero = Fp(u256.ZERO, self)
		self.one = Fp(u256.ONE, self)

	def __call__(self, value):
		return Fp(value, self)

	def __eq__(self, other):
		return isinstance(other, PrimeField) and self.p == other.p

	def __hash__(self):
		return hash(('Fp', int(self.p)))

	def __repr__(self):
		return 'PrimeField(' + (self.name or hex(self.p)) + ')'

	def from_bytes(self, data):
		return Fp.from_bytes(data, self)

	def canonical(self, a):
		if u256.u256_cmp(a, self.modulus) < 0:
			return a
		return u256.from_int(mpz(u256.to_int(a)) % self.p)

	def montgomery_reduce(self, t):
		"""REDC : t * R^-1 mod p pour t < p * R, t sur 8 limbs."""
		p = self.modulus
		t = list(t) + [0]
		for i in range(4):
			m, _ = u256.mul64(t[i], self.pinv)
			carry = 0
			for j in range(4):
				lo, hi = u256.mul64(m, p[j])
				s = t[i + j] + lo + carry
				t[i + j] = s & MASK64
				carry = hi + (s >> 64)
			for j in range(i + 4, 9):
				s = t[j] + carry
				t[j] = s & MASK64
				carry = s >> 64
		r = tuple(t[4:8])
		diff, borrow = u256.u256_sub(r, p)
		return u256.select(r, diff, t[8] or not borrow)

	def reduce_wide(self, t):
		# t mod p pour un produit t = a * b avec a, b < p
		r = self.montgomery_reduce(t)
		return self.montgomery_reduce(u256.u256_mul(r, self.r2))


class Fp:
	__slots__ = ('v', 'field')

	def __init__(self, value, field):
		self.field = field
		if isinstance(value, Fp):
			self.v = value.v
		elif isinstance(value, tuple):
			if len(value) != 4:
				raise ValueError('Fp expects 4 limbs')
			self.v = field.canonical(value)
		elif isinstance(value, (bytes, bytearray)):
			self.v = field.canonical(u256.from_bytes_be(value))
		else:
			# entier Python ou mpz, éventuellement négatif
			self.v = u256.from_int(mpz(value) % field.p)

	@classmethod
	def from_bytes(cls, data, field):
		# rejette les représentations non canoniques
		v = u256.from_bytes_be(data)
		if u256.u256_cmp(v, field.modulus) >= 0:
			raise ValueError('field element is not reduced')
		return cls(v, field)

	def to_bytes(self):
		return u256.to_bytes_be(self.v)

	def _coerce(self, other):
		if isinstance(other, Fp):
			if other.field is not self.field and other.field != self.field:
				raise ValueError('operands belong to different fields')
			return other
		return Fp(other, self.field)

	def add(self, other):
		other = self._coerce(other)
		s, carry = u256.u256_add(self.v, other.v)
		d, borrow = u256.u256_sub(s, self.field.modulus)
		return Fp(u256.select(s, d, carry or not borrow), self.field)

	def sub(self, other):
		other = self._coerce(other)
		d, borrow = u256.u256_sub(self.v, other.v)
		s, _ = u256.u256_add(d, self.field.modulus)
		return Fp(u256.select(d, s, borrow), self.field)

	def neg(self):
		return self.field.zero.sub(self)

	def double(self):
		return self.add(self)

	def triple(self):
		return self.double().add(self)

	def halve(self):
		# division par 2 modulo p impair : si la valeur est impaire, on ajoute p avant de décaler
		padd = u256.select(u256.ZERO, self.field.modulus, u256.is_odd(self.v))
		s, carry = u256.u256_add(self.v, padd)
		return Fp(u256.shr1(s, carry), self.field)

	def mul(self, other):
		other = self._coerce(other)
		return Fp(self.field.reduce_wide(u256.u256_mul(self.v, other.v)), self.field)

	def square(self):
		return self.mul(self)

	def inverse(self):
		if self.is_zero():
			raise ZeroDivisionError('zero has no inverse in Fp')
		return Fp(gmpy2.invert(mpz(int(self)), self.field.p), self.field)

	def sqrt(self):
		"""Racine carrée modulo p ; ValueError si l'élément n'est pas un carré."""
		p = self.field.p
		a = mpz(int(self))
		if a == 0:
			return self
		if gmpy2.legendre(a, p) != 1:
			raise ValueError('element is not a quadratic residue')
		if p % 4 == 3:
			r = gmpy2.powmod(a, (p + 1) // 4, p)
		elif p % 8 == 5:
			# Atkin
			t = gmpy2.powmod(2 * a, (p - 5) // 8, p)
			i = (2 * a * t * t) % p
			r = (a * t * (i - 1)) % p
		else:
			r = _tonelli_shanks(a, p)
		return Fp(r, self.field)

	def is_zero(self):
		return u256.is_zero(self.v)

	def is_one(self):
		return self.v == u256.ONE

	def is_odd(self):
		return u256.is_odd(self.v)

	def select(self, other, flag):
		return Fp(u256.select(self.v, other.v, flag), self.field)

	def __add__(self, other):
		return self.add(other)

	def __radd__(self, other):
		return self.add(other)

	def __sub__(self, other):
		return self.sub(other)

	def __rsub__(self, other):
		return self._coerce(other).sub(self)

	def __mul__(self, other):
		return self.mul(other)

	def __rmul__(self, other):
		return self.mul(other)

	def __neg__(self):
		return self.neg()

	def __eq__(self, other):
		if isinstance(other, Fp):
			return self.v == other.v and self.field == other.field
		if isinstance(other, (int, MPZ_TYPE)):
			return self.v == u256.from_int(mpz(other) % self.field.p)
		return NotImplemented

	def __hash__(self):
		return hash(self.v)

	def __int__(self):
		return u256.to_int(self.v)

	def __repr__(self):
		return hex(int(self))


def _tonelli_shanks(a, p):
	q, s = p - 1, 0
	while q % 2 == 0:
		q //= 2
		s += 1
	z = mpz(2)
	while gmpy2.legendre(z, p) != -1:
		z += 1
	m = s
	c = gmpy2.powmod(z, q, p)
	t = gmpy2.powmod(a, q, p)
	r = gmpy2.powmod(a, (q + 1) // 2, p)
	while t != 1:
		i, t2 = 0, t
		while t2 != 1:
			t2 = t2 * t2 % p
			i += 1
		b = gmpy2.powmod(c, 1 << (m - i - 1), p)
		m, c, t, r = i, b * b % p, t * b * b % p, r * b % p
	return r


class QuadraticField:
	"""Extension Fp2 = Fp[u]/(u² - β), β non résidu quadratique de Fp."""

	def __init__(self, base, non_residue, name=None):
		self.base = base
		self.beta = base(non_residue)
		if gmpy2.legendre(mpz(int(self.beta)), base.p) != -1:
			raise ValueError('u² must be a quadratic non-residue')
		self.beta_is_minus_two = self.beta == -2
		self.name = name
		self.nbytes = 2 * base.nbytes
		self.zero = Fp2(base.zero, base.zero, self)
		self.one = Fp2(base.one, base.zero, self)

	def __call__(self, a, b=0):
		return Fp2(self.base(a), self.base(b), self)

	def __eq__(self, other):
		return isinstance(other, QuadraticField) and self.base == other.base and self.beta == other.beta

	def __hash__(self):
		return hash(('Fp2', hash(self.base), int(self.beta)))

	def __repr__(self):
		return 'QuadraticField(' + (self.name or repr(self.base)) + ')'

	def from_bytes(self, data):
		return Fp2.from_bytes(data, self)

	def mul_nr(self, x):
		# x * β ; pour β = -2 : -(2x), sans multiplication
		if self.beta_is_minus_two:
			return x.double().neg()
		return x.mul(self.beta)


class Fp2:
	__slots__ = ('a', 'b', 'field')

	def __init__(self, a, b, field):
		self.a = a
		self.b = b
		self.field = field

	@classmethod
	def from_bytes(cls, data, field):
		# b ‖ a : coefficient de u en premier
		n = field.base.nbytes
		if len(data) != 2 * n:
			raise ValueError('expected %d bytes, got %d' % (2 * n, len(data)))
		return cls(Fp.from_bytes(data[n:], field.base), Fp.from_bytes(data[:n], field.base), field)

	def to_bytes(self):
		return self.b.to_bytes() + self.a.to_bytes()

	def _coerce(self, other):
		if isinstance(other, Fp2):
			if other.field is not self.field and other.field != self.field:
				raise ValueError('operands belong to different fields')
			return other
		if isinstance(other, Fp):
			other = self.field.base.zero._coerce(other)
			return Fp2(other, self.field.base.zero, self.field)
		return self.field(other)

	def add(self, other):
		other = self._coerce(other)
		return Fp2(self.a.add(other.a), self.b.add(other.b), self.field)

	def sub(self, other):
		other = self._coerce(other)
		return Fp2(self.a.sub(other.a), self.b.sub(other.b), self.field)

	def neg(self):
		return Fp2(self.a.neg(), self.b.neg(), self.field)

	def double(self):
		return Fp2(self.a.double(), self.b.double(), self.field)

	def triple(self):
		return Fp2(self.a.triple(), self.b.triple(), self.field)

	def halve(self):
		return Fp2(self.a.halve(), self.b.halve(), self.field)

	def mul(self, other):
		other = self._coerce(other)
		# Karatsuba : ac, bd et (a+b)(c+d) - ac - bd
		t0 = self.a.mul(other.a)
		t1 = self.b.mul(other.b)
		t2 = self.a.add(self.b).mul(other.a.add(other.b)).sub(t0).sub(t1)
		return Fp2(t0.add(self.field.mul_nr(t1)), t2, self.field)

	def square(self):
		t0 = self.a.square()
		t1 = self.b.square()
		t2 = self.a.add(self.b).square().sub(t0).sub(t1)
		return Fp2(t0.add(self.field.mul_nr(t1)), t2, self.field)

	def conjugate(self):
		return Fp2(self.a, self.b.neg(), self.field)

	def inverse(self):
		# 1/(a + bu) = (a - bu) / (a² - βb²)
		norm = self.a.square().sub(self.field.mul_nr(self.b.square()))
		ninv = norm.inverse()
		return Fp2(self.a.mul(ninv), self.b.neg().mul(ninv), self.field)

	def is_zero(self):
		return self.a.is_zero() and self.b.is_zero()

	def is_one(self):
		return self.a.is_one() and self.b.is_zero()

	def select(self, other, flag):
		return Fp2(self.a.select(other.a, flag), self.b.select(other.b, flag), self.field)

	def __add__(self, other):
		return self.add(other)

	def __radd__(self, other):
		return self.add(other)

	def __sub__(self, other):
		return self.sub(other)

	def __rsub__(self, other):
		return self._coerce(other).sub(self)

	def __mul__(self, other):
		return self.mul(other)

	def __rmul__(self, other):
		return self.mul(other)

	def __neg__(self):
		return self.neg()

	def __eq__(self, other):
		if isinstance(other, Fp2):
			return self.a == other.a and self.b == other.b and self.field == other.field
		if isinstance(other, Fp) and other.field != self.field.base:
			return False
		if isinstance(other, (Fp, int, MPZ_TYPE)):
			return self == self._coerce(other)
		return NotImplemented

	def __hash__(self):
		return hash((self.a.v, self.b.v))

	def __repr__(self):
		return '(' + repr(self.a) + ' + ' + repr(self.b) + '*u)'
