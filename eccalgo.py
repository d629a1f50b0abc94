#!/usr/bin/python3

# Package des algorithmes de crypto basés sur courbes elliptiques

import logging

# Just using the random module isn't enough
# Use SystemRandom() for a cryptographically secure RNG
from random import SystemRandom as Sr

from gmpy2 import mpz
from gmssl import sm3, func

import elliptic_curves as ec
from errors import CheckPointError, ZeroPoint

logger = logging.getLogger(__name__)


def int2bytes(e, fixedsize=None):
	if fixedsize:
		size = int(fixedsize)
	else:
		size = int(e).bit_length() // 8 + 1
	return int.to_bytes(int(e), size, byteorder='big')


def bytes2int(e):
	return int.from_bytes(e, byteorder='big')


def random_scalar(curve):
	# entier uniforme dans [1, n - 1]
	return mpz(Sr().randint(1, int(curve.order) - 1))


class SM3:
	"""Hachage SM3 (gmssl) avec l'interface des modules Crypto.Hash."""

	digest_size = 32

	def __init__(self, data=b''):
		self._data = bytes(data)

	@classmethod
	def new(cls, data=b''):
		return cls(data)

	def update(self, data):
		self._data += bytes(data)

	def hexdigest(self):
		return sm3.sm3_hash(func.bytes_to_list(self._data))

	def digest(self):
		return bytes.fromhex(self.hexdigest())


def kdf(z, klen, hashalgo=SM3):
	# GM/T 0003 : H(z ‖ ct) pour ct = 1, 2, ... sur 32 bits big endian, tronqué à klen octets
	t = b''
	ct = 1
	while len(t) < klen:
		t += hashalgo.new(z + ct.to_bytes(4, byteorder='big')).digest()
		ct += 1
	return t[:klen]


class ECEntity:
	def __init__(self, curve, secret=None):
		assert(type(curve) == ec.EllipticCurveJ)
		if not secret:
			secret = random_scalar(curve)
		self.secret = mpz(secret)
		self.curve = curve
		point = curve.g * self.secret
		logger.debug('public key on %s valid: %s', curve.params.name, point.is_valid())
		self.pubkey = point.to_affine()

	def pubkey_bytes(self, mode=ec.CompressMode.UNCOMPRESSED):
		return self.curve.point_to_bytes(self.pubkey, mode)

	def sharedsecret(self, pubkey):
		if isinstance(pubkey, (bytes, bytearray)):
			pubkey = self.curve.point_from_bytes(pubkey)
		if pubkey.is_zero():
			raise ZeroPoint('peer public key is the point at infinity')
		if pubkey.curve is not self.curve or not pubkey.is_valid():
			raise CheckPointError('peer public key is not a point of ' + str(self.curve.params.name))
		if self.curve.clear_cofactor(pubkey).is_zero():
			raise ZeroPoint('peer public key is in a small subgroup')
		shared = pubkey * self.secret
		if shared.is_zero():
			raise ZeroPoint('shared secret is the point at infinity')
		return shared.affine()[0].to_bytes()
