import unittest

from helpers import make_owners, make_vault
from vault.events import EventKind
from vault.exceptions import NotOwner, RequestFormattingError
from vault.forwarder import derive_forwarding_address


class TestForwarder(unittest.TestCase):
    def setUp(self):
        self.owners = make_owners(3)
        self.a, self.b = self.owners[0].vk, self.owners[1].vk
        self.vault = make_vault(self.owners, funds=0)

    def test_create_and_forward(self):
        # GIVEN a created forwarder
        address = self.vault.create_forwarder(self.a)
        self.assertEqual(address, derive_forwarding_address(self.vault.address, 0))

        # WHEN value is sent to it
        self.vault.ledger.credit(address, 200)

        # THEN it reaches the vault at once
        self.assertEqual(self.vault.ledger.balance_of(address), 0)
        self.assertEqual(self.vault.balance(), 200)
        event = self.vault.events.last(EventKind.DEPOSIT)
        self.assertEqual(event.payload, {'from': address, 'value': 200})

    def test_transfers_to_forwarder_are_forwarded(self):
        address = self.vault.create_forwarder(self.a)
        self.vault.ledger.credit("payer", 30)

        self.vault.ledger.transfer("payer", address, 30)

        self.assertEqual(self.vault.balance(), 30)
        self.assertEqual(self.vault.ledger.balance_of("payer"), 0)

    def test_multiple_forwarders(self):
        addresses = [self.vault.create_forwarder(self.a) for _ in range(10)]
        self.assertEqual(len(set(addresses)), 10)

        for address in addresses:
            self.vault.ledger.credit(address, 4)

        self.assertEqual(self.vault.balance(), 40)
        self.assertEqual(len(self.vault.events.of_kind(EventKind.DEPOSIT)), 10)

    def test_send_before_create_then_flush(self):
        # GIVEN value sent to a forwarding address before it exists
        address = self.vault.forwarding_address(0)
        self.vault.ledger.credit(address, 300)
        self.assertEqual(self.vault.balance(), 0)

        # WHEN the forwarder is created
        self.assertEqual(self.vault.create_forwarder(self.a), address)

        # THEN the earlier value waits for a flush
        self.assertEqual(self.vault.balance(), 0)
        self.assertEqual(self.vault.flush_forwarder(0), 300)
        self.assertEqual(self.vault.balance(), 300)

        # AND later value is forwarded directly
        self.vault.ledger.credit(address, 5)
        self.assertEqual(self.vault.balance(), 305)

    def test_flush_before_create(self):
        self.vault.ledger.credit(self.vault.forwarding_address(3), 12)

        self.assertEqual(self.vault.flush_forwarder(3), 12)
        self.assertEqual(self.vault.balance(), 12)

    def test_flush_only_reaches_derived_addresses(self):
        # GIVEN an unrelated account holding funds
        self.vault.ledger.credit("personal-account", 500)

        # THEN it cannot be named as a forwarder
        with self.assertRaises(RequestFormattingError):
            self.vault.flush_forwarder("personal-account")
        for nonce in range(5):
            self.vault.flush_forwarder(nonce)

        self.assertEqual(self.vault.ledger.balance_of("personal-account"), 500)
        self.assertEqual(self.vault.balance(), 0)

    def test_flush_empty_forwarder_emits_nothing(self):
        self.vault.create_forwarder(self.a)
        events = len(self.vault.events)

        self.assertEqual(self.vault.flush_forwarder(0), 0)
        self.assertEqual(len(self.vault.events), events)

    def test_non_owner_cannot_create_forwarder(self):
        with self.assertRaises(NotOwner):
            self.vault.create_forwarder("stranger")

        self.vault.ledger.credit(self.vault.forwarding_address(0), 9)
        self.assertEqual(self.vault.balance(), 0)

    def test_forwarded_deposit_rolls_back_with_the_call(self):
        # GIVEN a contract that pays into a forwarder and then fails
        forwarder = self.vault.create_forwarder(self.a)
        self.vault.ledger.credit(self.vault.address, 100)

        def pays_then_fails(sender, value, data):
            self.vault.ledger.transfer("contract", forwarder, value)
            raise RuntimeError("call reverted")

        self.vault.ledger.deploy("contract", pays_then_fails)
        outcome = self.vault.execute(self.a, "contract", 60)

        # WHEN the confirmation runs the call
        with self.assertRaises(RuntimeError):
            self.vault.confirm(self.b, outcome.operation)

        # THEN neither the value nor the deposit event survive
        self.assertEqual(self.vault.events.of_kind(EventKind.DEPOSIT), [])
        self.assertEqual(self.vault.balance(), 100)
        self.assertEqual(self.vault.ledger.balance_of("contract"), 0)

    def test_derivation_is_deterministic(self):
        self.assertEqual(derive_forwarding_address("parent", 3), derive_forwarding_address("parent", 3))
        self.assertNotEqual(derive_forwarding_address("parent", 3), derive_forwarding_address("parent", 4))
        self.assertNotEqual(derive_forwarding_address("parent", 3), derive_forwarding_address("other", 3))


if __name__ == '__main__':
    unittest.main()
