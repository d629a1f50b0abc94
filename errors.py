#!/usr/bin/python3

# Erreurs remontées par le noyau arithmétique et par les protocoles


class EccError(Exception):
	pass


class InvalidPoint(EccError):
	# coordonnées affines du point à l'infini
	pass


class PointDecodeError(EccError, ValueError):
	pass


class ZeroPoint(EccError):
	# point nul là où le protocole exige un point valide (secret partagé, [h]P)
	pass


class ZeroData(EccError):
	# flux de la KDF entièrement nul
	pass


class HashNotEqual(EccError):
	pass


class CheckPointError(EccError):
	pass


class InvalidCiphertext(EccError):
	pass
