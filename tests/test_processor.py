import unittest

from helpers import FakeClock, cosign, make_owners, make_vault
from vault.constants import Constants as c
from vault.processor import RequestProcessor


class TestRequestProcessor(unittest.TestCase):
    def setUp(self):
        self.owners = make_owners(3)
        self.a, self.b, self.c = self.owners
        self.clock = FakeClock()
        self.vault = make_vault(self.owners, required=2, daily_limit=100, clock=self.clock)
        self.processor = RequestProcessor(self.vault)

    def request(self, sender, function, **kwargs):
        return self.processor.process({'sender': sender, 'function': function, 'kwargs': kwargs})

    def test_execute_under_limit(self):
        result = self.request(self.a.vk, 'execute', target="receiver", value=30)

        self.assertEqual(result['status'], c.OkCode)
        self.assertEqual(result['result'], {'status': "executed", 'operation': None})
        self.assertEqual([e['event'] for e in result['events']], ["SingleTransact"])
        self.assertEqual(self.vault.ledger.balance_of("receiver"), 30)

    def test_pending_then_confirm(self):
        pending = self.request(self.a.vk, 'execute', target="receiver", value=500, data="0xab")
        operation = pending['result']['operation']

        self.assertEqual(pending['result']['status'], "pending")
        self.assertEqual(
            [e['event'] for e in pending['events']],
            ["Confirmation", "ConfirmationNeeded"],
        )

        done = self.request(self.b.vk, 'confirm', operation=operation)

        self.assertEqual(done['result']['status'], "executed")
        self.assertEqual(self.vault.ledger.balance_of("receiver"), 500)
        multi = done['events'][-1]
        self.assertEqual(multi['event'], "MultiTransact")
        self.assertEqual(multi['payload']['data'], "ab")

    def test_execute_and_confirm(self):
        expiry = self.clock.now + 60
        cosignature = cosign(self.vault, self.b, "receiver", 500, b"", expiry, 1)

        result = self.request(
            self.a.vk,
            'execute_and_confirm',
            target="receiver",
            value=500,
            expiry=expiry,
            sequence_id=1,
            cosignature={'signer': cosignature.signer, 'signature': cosignature.signature},
        )

        self.assertEqual(result['status'], c.OkCode)
        self.assertEqual(result['result']['status'], "executed")
        self.assertEqual(self.vault.next_sequence_id(), 2)

    def test_unknown_operation_is_not_found(self):
        result = self.request(self.a.vk, 'confirm', operation="ab" * 32)

        self.assertEqual(result['status'], c.NotFoundCode)
        self.assertEqual(result['error'], "Operation is not pending.")

    def test_engine_errors_are_mapped(self):
        result = self.request(self.a.vk, 'add_owner', owner=self.b.vk)

        self.assertEqual(result['status'], c.ErrorCode)
        self.assertEqual(result['error'], "Address is already an owner.")
        self.assertEqual(result['events'], [])

    def test_malformed_request(self):
        result = self.processor.process({'sender': self.a.vk, 'function': 'execute'})

        self.assertEqual(result['status'], c.ErrorCode)
        self.assertEqual(result['error'], "Request is not formatted properly.")

    def test_failed_request_leaves_state_untouched(self):
        before = len(self.vault.events)
        result = self.request(self.a.vk, 'remove_owner', owner="stranger")

        self.assertEqual(result['status'], c.ErrorCode)
        self.assertEqual(len(self.vault.events), before)
        self.assertEqual(self.vault.pending_operations(), [])

    def test_forwarder_and_deposit(self):
        created = self.request(self.a.vk, 'create_forwarder')
        self.assertEqual(created['result'], self.vault.forwarding_address(0))
        early = self.vault.forwarding_address(1)
        self.vault.ledger.credit(early, 7)

        flushed = self.request("anyone", 'flush_forwarder', nonce=1)

        self.assertEqual(flushed['result'], 7)
        self.assertEqual(flushed['events'][0]['payload'], {'from': early, 'value': 7})

        rejected = self.request("anyone", 'flush_forwarder', nonce="personal-account")
        self.assertEqual(rejected['status'], c.ErrorCode)

        self.vault.ledger.credit("donor", 5)
        deposit = self.request("donor", 'deposit', value=5)
        self.assertEqual(deposit['events'][0]['event'], "Deposit")
        self.assertEqual(self.vault.balance(), 2012)


if __name__ == '__main__':
    unittest.main()
