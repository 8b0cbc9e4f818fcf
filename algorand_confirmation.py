# SPDX-License-Identifier: AGPL-3.0-only
# (c) 2025


class ConfirmationError(Exception):
	pass


class InvalidArgument(ConfirmationError, ValueError):
	pass


class TransactionRejected(ConfirmationError):
	def __init__(self, tx_id, pool_error):
		super().__init__(f'Transaction {tx_id} rejected - pool error: {pool_error}')
		self.tx_id = tx_id
		self.pool_error = pool_error


class TransactionTimeout(ConfirmationError):
	def __init__(self, tx_id, max_rounds):
		super().__init__(f'Transaction {tx_id} not confirmed after {max_rounds} rounds!')
		self.tx_id = tx_id
		self.max_rounds = max_rounds


def wait_for_confirmation(client, tx_id, max_rounds):
	"""Block until tx_id is confirmed, rejected, or max_rounds rounds have passed.

	client is an algod client (status, pending_transaction_info and
	status_after_block are used). Returns the pending transaction info of the
	confirmed transaction. Errors raised by the client are not caught.
	"""
	if client is None or not tx_id or max_rounds < 0:
		raise InvalidArgument(f'Bad arguments: {client=!r}, {tx_id=!r}, {max_rounds=!r}')

	last_round = client.status().get('last-round')
	if last_round is None:
		raise ConfirmationError('Unable to get node status')

	start_round = last_round + 1
	current_round = start_round

	while current_round < start_round + max_rounds:
		pending_info = client.pending_transaction_info(tx_id)
		if (pending_info.get('confirmed-round') or 0) > 0:
			return pending_info
		if pool_error := pending_info.get('pool-error'):
			raise TransactionRejected(tx_id, pool_error)

		client.status_after_block(current_round)
		current_round += 1

	raise TransactionTimeout(tx_id, max_rounds)
