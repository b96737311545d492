import unittest

from parameterized import parameterized

from vault import requests as r
from vault.exceptions import RequestFormattingError
from vault.signatures import CoSignature

SENDER = "aa" * 32


def raw(function, **kwargs):
    return {'sender': SENDER, 'function': function, 'kwargs': kwargs}


class TestParseRequest(unittest.TestCase):
    def test_execute_with_and_without_data(self):
        request = r.parse_request(raw('execute', target="receiver", value=10, data="0x0102"))
        self.assertEqual(request, r.Execute(sender=SENDER, target="receiver", value=10, data=b"\x01\x02"))

        request = r.parse_request(raw('execute', target="receiver", value=10))
        self.assertEqual(request.data, b"")

    def test_execute_and_confirm(self):
        cosignature = {'signer': "bb" * 32, 'signature': "cc" * 64}
        request = r.parse_request(raw(
            'execute_and_confirm',
            target="receiver",
            value=10,
            expiry=1700000000,
            sequence_id=1,
            cosignature=cosignature,
        ))
        self.assertIsInstance(request, r.ExecuteAndConfirm)
        self.assertEqual(request.cosignature, CoSignature(signer="bb" * 32, signature="cc" * 64))
        self.assertEqual(request.data, b"")

    def test_flush_forwarder_takes_a_nonce(self):
        self.assertEqual(r.parse_request(raw('flush_forwarder', nonce=2)), r.FlushForwarder(sender=SENDER, nonce=2))

    def test_admin_requests(self):
        self.assertEqual(r.parse_request(raw('reset_spent_today')), r.ResetSpentToday(sender=SENDER))
        self.assertEqual(
            r.parse_request(raw('replace_owner', old_owner="x", new_owner="y")),
            r.ReplaceOwner(sender=SENDER, old_owner="x", new_owner="y"),
        )
        self.assertEqual(
            r.parse_request(raw('set_daily_limit', ceiling=0)),
            r.SetDailyLimit(sender=SENDER, ceiling=0),
        )

    @parameterized.expand([
        ("not_a_dict", ["execute"]),
        ("missing_key", {'sender': SENDER, 'function': 'execute'}),
        ("extra_key", {**raw('deposit', value=1), 'nonce': 1}),
        ("empty_sender", {**raw('deposit', value=1), 'sender': ""}),
        ("bad_function_name", raw('Execute!', value=1)),
        ("unknown_function", raw('selfdestruct')),
        ("missing_kwarg", raw('execute', target="receiver")),
        ("unexpected_kwarg", raw('confirm', operation="ab" * 32, owner="x")),
        ("negative_value", raw('execute', target="receiver", value=-1)),
        ("bool_value", raw('execute', target="receiver", value=True)),
        ("odd_hex_data", raw('execute', target="receiver", value=1, data="abc")),
        ("trailing_newline_data", raw('execute', target="receiver", value=1, data="ab\n")),
        ("flush_by_address", raw('flush_forwarder', nonce="personal-account")),
        ("short_fingerprint", raw('confirm', operation="abcd")),
        ("bad_cosignature", raw(
            'execute_and_confirm', target="receiver", value=1, expiry=1, sequence_id=1,
            cosignature={'signer': "bb" * 32},
        )),
    ])
    def test_malformed_requests_are_rejected(self, name, request):
        with self.assertRaises(RequestFormattingError):
            r.parse_request(request)


if __name__ == '__main__':
    unittest.main()
