import unittest

from parameterized import parameterized

from vault.utils.encoding import data_from_hex, data_to_hex, pack
from vault.utils.hash import action_fingerprint, operation_fingerprint, signing_fingerprint

BASE = {
    'instance_id': "vault-1",
    'target': "receiver",
    'value': 50,
    'data': b"\x01\x02",
    'expiry': 1700000060,
    'sequence_id': 1,
}


class TestFingerprints(unittest.TestCase):
    def test_identical_fields_give_identical_fingerprints(self):
        self.assertEqual(signing_fingerprint(**BASE), signing_fingerprint(**dict(BASE)))
        self.assertEqual(
            operation_fingerprint("vault-1", "receiver", 50, b""),
            operation_fingerprint("vault-1", "receiver", 50, b""),
        )

    @parameterized.expand([
        ("instance_id", "vault-2"),
        ("target", "receiver2"),
        ("value", 51),
        ("data", b"\x01\x03"),
        ("expiry", 1700000061),
        ("sequence_id", 2),
    ])
    def test_any_field_change_changes_fingerprint(self, field, value):
        changed = {**BASE, field: value}
        self.assertNotEqual(signing_fingerprint(**BASE), signing_fingerprint(**changed))

    def test_paths_do_not_collide(self):
        self.assertNotEqual(
            operation_fingerprint("vault-1", "receiver", 50, b""),
            signing_fingerprint("vault-1", "receiver", 50, b"", 0, 0),
        )
        self.assertNotEqual(
            action_fingerprint("vault-1", "add_owner", "x"),
            action_fingerprint("vault-1", "remove_owner", "x"),
        )

    def test_fingerprint_is_hex_sha3(self):
        fp = operation_fingerprint("vault-1", "receiver", 50, b"")
        self.assertEqual(len(fp), 64)
        int(fp, 16)


class TestPacking(unittest.TestCase):
    def test_length_prefix_prevents_shifting(self):
        self.assertNotEqual(pack("ab", "c"), pack("a", "bc"))

    def test_types_are_tagged(self):
        self.assertNotEqual(pack("1"), pack(1))
        self.assertNotEqual(pack(b"a"), pack("a"))

    @parameterized.expand([
        ("negative", -1, ValueError),
        ("too_large", 1 << 256, ValueError),
        ("boolean", True, TypeError),
        ("float", 1.5, TypeError),
    ])
    def test_rejects_unpackable_values(self, name, value, error):
        with self.assertRaises(error):
            pack(value)

    def test_hex_data(self):
        self.assertEqual(data_from_hex("0xab3456"), b"\xab\x34\x56")
        self.assertEqual(data_from_hex(""), b"")
        self.assertEqual(data_to_hex(b"\xab\x34\x56"), "ab3456")
        with self.assertRaises(ValueError):
            data_from_hex("zz")


if __name__ == '__main__':
    unittest.main()
