#!/usr/bin/python3

import sys

import sm2
from elliptic_curves import CompressMode
from errors import EccError
from gmparams import gmCurves

modes = {
	'compressed': CompressMode.COMPRESSED,
	'uncompressed': CompressMode.UNCOMPRESSED,
	'mixed': CompressMode.MIXED,
}


def main_keygen(mode='uncompressed'):
	pk, sk = sm2.gen_keypair(modes[mode])
	return sk.to_hex() + ' ' + pk.to_bytes().hex()


def main_encrypt(pubkey_hexstr, text, mode='uncompressed'):
	pk = sm2.Sm2PublicKey.from_bytes(bytes.fromhex(pubkey_hexstr), modes[mode])
	return pk.encrypt(text.encode('UTF-8')).hex()


def main_decrypt(privkey_hexstr, ciphertext_hexstr, mode='uncompressed'):
	sk = sm2.Sm2PrivateKey.from_hex(privkey_hexstr, modes[mode])
	return sk.decrypt(bytes.fromhex(ciphertext_hexstr)).decode('UTF-8')


def main_mul(curve_name, scalar_hexstr, point_hexstr=None):
	curve = gmCurves[curve_name]
	scalar = int(scalar_hexstr, 16)
	if point_hexstr:
		point = curve.point_from_bytes(bytes.fromhex(point_hexstr))
	else:
		point = curve.g
	return curve.point_to_bytes(point * scalar).hex()


commands = {
	'keygen': main_keygen,
	'encrypt': main_encrypt,
	'decrypt': main_decrypt,
	'mul': main_mul,
}


def main(argv=None):
	args = tuple(sys.argv if argv is None else argv)[1:]
	if len(args) == 0 or args[0] not in commands:
		print('usage: script.py keygen [mode] | encrypt <pk> <text> [mode] | '
			'decrypt <sk> <ct> [mode] | mul <curve> <scalar> [point]', file=sys.stderr)
		return 1
	try:
		print(commands[args[0]](*args[1:]))
	except (EccError, ValueError, KeyError, TypeError, UnicodeDecodeError) as e:
		print('Error:', e, file=sys.stderr)
		return 1
	return 0


if __name__ == '__main__':
	sys.exit(main())
