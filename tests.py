#!/usr/bin/python3

# Package pour les tests


def singletest(test, **kwargs):
	# les noms utilisés dans l'expression sont passés explicitement à eval
	testresult = eval(test, {}, dict(kwargs))
	if not testresult:
		raise Exception('Test failed: ' + str(test))
	print(test + ' : OK')
	return testresult
