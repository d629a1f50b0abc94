#!/usr/bin/python3

# Entiers non signés de taille fixe
# U256 : 4 limbs de 64 bits, U512 : 8 limbs, du poids faible au poids fort
# Aucune réduction modulaire implicite : les débordements sont signalés par carry/borrow

MASK64 = 0xFFFFFFFFFFFFFFFF
MASK32 = 0xFFFFFFFF

ZERO = (0, 0, 0, 0)
ONE = (1, 0, 0, 0)
TWO = (2, 0, 0, 0)
FIVE = (5, 0, 0, 0)
MAX = (MASK64, MASK64, MASK64, MASK64)


def _add(a, b, nlimbs):
	s = [0] * nlimbs
	carry = 0
	for i in range(nlimbs):
		t = a[i] + b[i] + carry
		s[i] = t & MASK64
		carry = t >> 64
	return tuple(s), bool(carry)


def _sub(a, b, nlimbs):
	r = [0] * nlimbs
	borrow = 0
	for i in range(nlimbs):
		t = a[i] - b[i] - borrow
		r[i] = t & MASK64
		borrow = 1 if t < 0 else 0
	return tuple(r), bool(borrow)


def u256_add(a, b):
	return _add(a, b, 4)


def u512_add(a, b):
	return _add(a, b, 8)


def u256_sub(a, b):
	return _sub(a, b, 4)


def u512_sub(a, b):
	return _sub(a, b, 8)


def u256_cmp(a, b):
	for i in range(3, -1, -1):
		if a[i] > b[i]:
			return 1
		if a[i] < b[i]:
			return -1
	return 0


def u256_mul(a, b):
	"""Produit exact 256 x 256 -> 512 bits.

	Chaque limb est découpé en deux demi-limbs de 32 bits : tous les produits
	partiels tiennent alors sur 64 bits, sans multiplication élargie.
	"""
	a_ = [0] * 8
	b_ = [0] * 8
	for i in range(4):
		a_[2 * i] = a[i] & MASK32
		b_[2 * i] = b[i] & MASK32
		a_[2 * i + 1] = a[i] >> 32
		b_[2 * i + 1] = b[i] >> 32

	s = [0] * 16
	for i in range(8):
		u = 0
		for j in range(8):
			u = s[i + j] + a_[i] * b_[j] + u
			s[i + j] = u & MASK32
			u >>= 32
		s[i + 8] = u

	return tuple((s[2 * i + 1] << 32) | s[2 * i] for i in range(8))


def mul64(a, b):
	# (lo, hi) = a * b, 64 x 64 -> 128 bits par demi-limbs
	a0, a1 = a & MASK32, a >> 32
	b0, b1 = b & MASK32, b >> 32
	p00 = a0 * b0
	p01 = a0 * b1
	p10 = a1 * b0
	p11 = a1 * b1
	mid = (p00 >> 32) + (p01 & MASK32) + (p10 & MASK32)
	lo = (p00 & MASK32) | ((mid & MASK32) << 32)
	hi = p11 + (p01 >> 32) + (p10 >> 32) + (mid >> 32)
	return lo, hi


def to_bytes_be(a):
	# limb de poids fort en premier, chaque limb en big endian
	return b''.join(limb.to_bytes(8, byteorder='big') for limb in reversed(a))


def from_bytes_be(data, nlimbs=4):
	data = bytes(data)
	if len(data) != 8 * nlimbs:
		raise ValueError('expected %d bytes, got %d' % (8 * nlimbs, len(data)))
	return tuple(int.from_bytes(data[8 * (nlimbs - 1 - i):8 * (nlimbs - i)], byteorder='big')
				for i in range(nlimbs))


def from_int(v, nlimbs=4):
	v = int(v)
	if v < 0 or v.bit_length() > 64 * nlimbs:
		raise ValueError('integer out of range for %d limbs' % nlimbs)
	return tuple((v >> (64 * i)) & MASK64 for i in range(nlimbs))


def to_int(a):
	v = 0
	for limb in reversed(a):
		v = (v << 64) | limb
	return v


def from_hex(s):
	s = s.replace(' ', '')
	return from_bytes_be(bytes.fromhex(s.rjust(64, '0')))


def is_zero(a):
	acc = 0
	for limb in a:
		acc |= limb
	return acc == 0


def is_odd(a):
	return bool(a[0] & 1)


def bit(a, i):
	return (a[i >> 6] >> (i & 63)) & 1


def shr1(a, carry_in=0):
	# décalage à droite d'un bit ; carry_in devient le bit de poids fort
	r = [0] * len(a)
	top = carry_in & 1
	for i in range(len(a) - 1, -1, -1):
		r[i] = (a[i] >> 1) | (top << 63)
		top = a[i] & 1
	return tuple(r)


def select(a, b, flag):
	# b si flag, a sinon, sans branchement sur flag
	mask = -int(bool(flag)) & MASK64
	return tuple(x ^ ((x ^ y) & mask) for x, y in zip(a, b))
