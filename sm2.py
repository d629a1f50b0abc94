#!/usr/bin/python3

# Chiffrement à clé publique SM2 (GM/T 0003.4)
# Chiffré : C1 ‖ C2 ‖ C3, avec C1 = [k]G, C2 = M ⊕ KDF(x2 ‖ y2), C3 = H(x2 ‖ M ‖ y2)

import hmac
import logging

from Crypto.Util.strxor import strxor
from gmpy2 import mpz

from eccalgo import SM3, kdf, random_scalar
from elliptic_curves import CompressMode
from errors import (CheckPointError, HashNotEqual, InvalidCiphertext, PointDecodeError,
					ZeroData, ZeroPoint)
from gmparams import sm2Curve

logger = logging.getLogger(__name__)


class Sm2PublicKey:
	def __init__(self, point, compress_mode=CompressMode.UNCOMPRESSED, curve=sm2Curve):
		self.curve = curve
		self.p = point
		self.compress_mode = compress_mode

	@classmethod
	def from_bytes(cls, data, compress_mode=CompressMode.UNCOMPRESSED, curve=sm2Curve):
		point = curve.point_from_bytes(data)
		return cls(point, compress_mode, curve)

	def to_bytes(self):
		return self.curve.point_to_bytes(self.p, self.compress_mode)

	def to_str_hex(self):
		x, y = self.p.affine()
		return x.to_bytes().hex() + y.to_bytes().hex()

	def encrypt(self, msg, hashalgo=SM3):
		if isinstance(msg, str):
			msg = msg.encode('UTF-8')
		msg = bytes(msg)
		klen = len(msg)
		s = self.curve.clear_cofactor(self.p)
		if s.is_zero():
			raise ZeroPoint('[h]P is the point at infinity')
		if not self.p.is_valid():
			raise CheckPointError('public key is not a curve point')
		while True:
			k = random_scalar(self.curve)
			# la coordonnée z est abandonnée : C1 doit être en coordonnées affines
			c1 = (self.curve.g * k).to_affine()
			c2_p = self.p * k
			if c2_p.is_zero():
				raise ZeroPoint('[k]P is the point at infinity')
			x2, y2 = c2_p.affine()
			x2_bytes = x2.to_bytes()
			y2_bytes = y2.to_bytes()
			t = kdf(x2_bytes + y2_bytes, klen, hashalgo)
			if klen > 0 and not any(t):
				logger.debug('KDF output is all zero, retrying with a new k')
				continue
			c2 = strxor(msg, t) if klen > 0 else b''
			c3 = hashalgo.new(x2_bytes + msg + y2_bytes).digest()
			return self.curve.point_to_bytes(c1, self.compress_mode) + c2 + c3


class Sm2PrivateKey:
	def __init__(self, d, compress_mode=CompressMode.UNCOMPRESSED, curve=sm2Curve):
		d = mpz(d)
		if not 0 < d < curve.order:
			raise ValueError('private key out of range')
		self.d = d
		self.compress_mode = compress_mode
		self.curve = curve

	@classmethod
	def from_hex(cls, s, compress_mode=CompressMode.UNCOMPRESSED):
		return cls(int(s, 16), compress_mode)

	def to_hex(self):
		return int(self.d).to_bytes(32, byteorder='big').hex()

	def public_key(self):
		return public_from_private(self, self.compress_mode)

	def decrypt(self, ciphertext, hashalgo=SM3):
		ciphertext = bytes(ciphertext)
		c1_end = self.curve.encoded_length(self.compress_mode)
		if len(ciphertext) < c1_end + hashalgo.digest_size:
			raise InvalidCiphertext('ciphertext too short')

		c1_bytes = ciphertext[:c1_end]
		c2 = ciphertext[c1_end:len(ciphertext) - hashalgo.digest_size]
		c3 = ciphertext[len(ciphertext) - hashalgo.digest_size:]
		klen = len(c2)

		try:
			c1 = self.curve.point_from_bytes(c1_bytes)
		except PointDecodeError as e:
			raise CheckPointError('C1 is not a valid curve point') from e
		if not c1.is_valid_affine():
			raise CheckPointError('C1 is not a valid curve point')

		if self.curve.clear_cofactor(c1).is_zero():
			raise ZeroPoint('[h]C1 is the point at infinity')

		c2_p = c1 * self.d
		if c2_p.is_zero():
			raise ZeroPoint('[d]C1 is the point at infinity')
		x2, y2 = c2_p.affine()
		x2_bytes = x2.to_bytes()
		y2_bytes = y2.to_bytes()
		t = kdf(x2_bytes + y2_bytes, klen, hashalgo)
		if klen > 0 and not any(t):
			raise ZeroData('KDF output is all zero')

		m = strxor(c2, t) if klen > 0 else b''
		u = hashalgo.new(x2_bytes + m + y2_bytes).digest()
		if not hmac.compare_digest(u, c3):
			raise HashNotEqual('C3 does not match the decrypted message')
		return m


def gen_keypair(compress_mode=CompressMode.UNCOMPRESSED):
	sk = Sm2PrivateKey(random_scalar(sm2Curve), compress_mode)
	return public_from_private(sk, compress_mode), sk


def public_from_private(sk, compress_mode=CompressMode.UNCOMPRESSED):
	p = sk.curve.g * sk.d
	logger.debug('Check public_key point = %s', p.is_valid())
	return Sm2PublicKey(p.to_affine(), compress_mode, sk.curve)
