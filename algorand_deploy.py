# SPDX-License-Identifier: AGPL-3.0-only
# (c) 2025

import argparse
import base64
import os
import pathlib

from algosdk import account, error, mnemonic, transaction
from algosdk.v2client import algod
from dotenv import load_dotenv

from algorand_confirmation import ConfirmationError, wait_for_confirmation


HERE = pathlib.Path(__file__).resolve().parent

SANDBOX_ALGOD_ADDRESS = 'http://localhost:4001'
SANDBOX_ALGOD_TOKEN = 'a' * 64


def get_y_or_n_from_input(msg):
	while True:
		match t1 := input(msg + ' (y/n): ').strip():
			case 'n':
				return False
			case 'y':
				return True
			case _:
				print(f'Error: {t1!r} is not recognized.')


def compile_program(client, source):
	return base64.b64decode(client.compile(source)['result'])


def read_program(client, path):
	with open(path, 'r') as f:
		return compile_program(client, f.read())


def create_app(
	client, private_key, approval_program, clear_program,
	local_ints, local_bytes, global_ints, global_bytes,
	fee=1000, wait_rounds=4, log=print,
):
	"""Submit an application create transaction and return the new app id.

	fee is a flat fee in microAlgos; None keeps the node's suggested fee.
	"""
	sender = account.address_from_private_key(private_key)

	params = client.suggested_params()
	if fee is not None:
		params.fee = fee
		params.flat_fee = True

	txn = transaction.ApplicationCreateTxn(
		sender=sender,
		sp=params,
		on_complete=transaction.OnComplete.NoOpOC,
		approval_program=approval_program,
		clear_program=clear_program,
		global_schema=transaction.StateSchema(num_uints=global_ints, num_byte_slices=global_bytes),
		local_schema=transaction.StateSchema(num_uints=local_ints, num_byte_slices=local_bytes),
	)

	signed_txn = transaction.SignedTransaction(txn, txn.raw_sign(private_key))
	tx_id = signed_txn.get_txid()
	log(f'Signed transaction with txID: {tx_id}')

	log('Sending request to node...')
	client.send_transaction(signed_txn)

	app_id = wait_for_confirmation(client, tx_id, wait_rounds)['application-index']
	log(f'Created new app-id: {app_id}')
	return app_id


def main(argv=None):
	load_dotenv()

	parser0 = argparse.ArgumentParser(allow_abbrev=False, description='Create an Algorand application from a pair of TEAL programs.')

	parser0.add_argument('--algod-address', default=os.environ.get('ALGOD_ADDRESS', SANDBOX_ALGOD_ADDRESS), metavar='URL', help='The algod node to connect to. Default: $ALGOD_ADDRESS or %(default)s')
	parser0.add_argument('--algod-token', default=os.environ.get('ALGOD_TOKEN', SANDBOX_ALGOD_TOKEN), metavar='TOKEN', help='The algod API token. Default: $ALGOD_TOKEN or the sandbox token')
	parser0.add_argument('--mnemonic', default=os.environ.get('CREATOR_MNEMONIC'), metavar='WORDS', help='The 25-word mnemonic of the creator account. Default: $CREATOR_MNEMONIC')
	parser0.add_argument('--approval', default=HERE / 'approval_program.teal', metavar='PATH', help='The approval program TEAL source. Default: %(default)s')
	parser0.add_argument('--clear', default=HERE / 'clear_program.teal', metavar='PATH', help='The clear state program TEAL source. Default: %(default)s')
	parser0.add_argument('--local-ints', type=int, default=1, metavar='NUMBER', help='Default: %(default)s')
	parser0.add_argument('--local-bytes', type=int, default=1, metavar='NUMBER', help='Default: %(default)s')
	parser0.add_argument('--global-ints', type=int, default=1, metavar='NUMBER', help='Default: %(default)s')
	parser0.add_argument('--global-bytes', type=int, default=0, metavar='NUMBER', help='Default: %(default)s')
	fee_group = parser0.add_mutually_exclusive_group()
	fee_group.add_argument('--fee', type=int, default=1000, metavar='MICROALGOS', help='Flat transaction fee. Default: %(default)s')
	fee_group.add_argument('--suggested-fee', dest='fee', action='store_const', const=None, help='Use the fee suggested by the node instead of a flat fee.')
	parser0.add_argument('--wait-rounds', type=int, default=4, metavar='NUMBER', help='How many rounds to wait for confirmation. Default: %(default)s')
	parser0.add_argument('--yes', action='store_true', help='Do not ask for confirmation.')
	parser0.add_argument('--quiet', action='store_true', help='Only print the new app id.')

	args0 = parser0.parse_args(argv)

	if args0.mnemonic is None:
		parser0.error('a creator mnemonic is required (--mnemonic or $CREATOR_MNEMONIC)')
	for name in ('wait_rounds', 'fee', 'local_ints', 'local_bytes', 'global_ints', 'global_bytes'):
		if (value := getattr(args0, name)) is not None and value < 0:
			parser0.error(f'--{name.replace("_", "-")} must be >= 0 (got {value})')

	log = (lambda *args: None) if args0.quiet else print

	try:
		private_key = mnemonic.to_private_key(args0.mnemonic)
	except Exception as e:
		print(f'Error: invalid mnemonic: {e}')
		return 1
	creator = account.address_from_private_key(private_key)

	client = algod.AlgodClient(args0.algod_token, args0.algod_address)

	try:
		log('Compiling approval program...')
		approval_program = read_program(client, args0.approval)
		log('Compiling clear program...')
		clear_program = read_program(client, args0.clear)

		if not args0.yes:
			print(
				'\n'
				'Is this correct?\n'
				f'Node:\t{args0.algod_address}\n'
				f'Creator:\t{creator}\n'
				f'Approval program:\t{args0.approval} ({len(approval_program)} bytes)\n'
				f'Clear program:\t{args0.clear} ({len(clear_program)} bytes)\n'
				f'Local state:\t{args0.local_ints} ints, {args0.local_bytes} byte slices\n'
				f'Global state:\t{args0.global_ints} ints, {args0.global_bytes} byte slices\n'
				f'Fee:\t{"suggested" if args0.fee is None else f"{args0.fee} microAlgos"}\n'
				'\n'
			)
			if not get_y_or_n_from_input('y: confirm, n: cancel '):
				print('Canceled.')
				return 1

		app_id = create_app(
			client, private_key, approval_program, clear_program,
			args0.local_ints, args0.local_bytes, args0.global_ints, args0.global_bytes,
			fee=args0.fee, wait_rounds=args0.wait_rounds, log=log,
		)
	except (ConfirmationError, error.AlgodHTTPError, OSError) as e:
		print(f'Error: {e}')
		return 1

	if args0.quiet:
		print(app_id)
	return 0


if __name__ == '__main__':
	raise SystemExit(main())
