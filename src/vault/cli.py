import sys

from argparse import ArgumentParser
from pathlib import Path

from loguru import logger

from vault.config import VaultConfig, load_config, save_config
from vault.constants import Constants as c
from vault.signatures import generate_keypair, sign, verify
from vault.utils.encoding import data_from_hex
from vault.utils.hash import signing_fingerprint


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(description='Quorum vault key, config and signing tool')
    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        help='Log level (overrides the config file)'
    )
    sub = parser.add_subparsers(dest='command')

    sub.add_parser('keygen', help='Generate an ed25519 owner key pair')

    init = sub.add_parser('init', help='Write a vault config file')
    init.add_argument('--owners', type=str, required=True, help='Comma-separated owner verify keys')
    init.add_argument('--required', type=int, required=True, help='Confirmations required')
    init.add_argument('--daily-limit', type=int, default=0, help='Single-owner daily allowance')
    init.add_argument('--instance-id', type=str, default=None, help='Vault instance id')
    init.add_argument('--config', type=Path, default=c.CONFIG_FILE, help='Path to save the config')

    fingerprint = sub.add_parser('fingerprint', help='Compute a co-signing fingerprint')
    fingerprint.add_argument('--config', type=Path, default=c.CONFIG_FILE, help='Vault config file')
    fingerprint.add_argument('--target', type=str, required=True)
    fingerprint.add_argument('--value', type=int, required=True)
    fingerprint.add_argument('--data', type=str, default='', help='Hex call data')
    fingerprint.add_argument('--expiry', type=int, required=True, help='Unix time the signature expires')
    fingerprint.add_argument('--sequence-id', type=int, required=True)

    signer = sub.add_parser('sign', help='Sign a fingerprint with an owner key')
    signer.add_argument('--key', type=str, required=True, help='Signing key hex')
    signer.add_argument('--fingerprint', type=str, required=True)

    verifier = sub.add_parser('verify', help='Verify a co-signature')
    verifier.add_argument('--signer', type=str, required=True, help='Verify key hex')
    verifier.add_argument('--fingerprint', type=str, required=True)
    verifier.add_argument('--signature', type=str, required=True)

    return parser


def setup_logging(level: str):
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def keygen(args):
    sk, vk = generate_keypair()
    print(f"signing_key: {sk}")
    print(f"verify_key:  {vk}")
    return 0


def init(args):
    owners = [o.strip() for o in args.owners.split(',') if o.strip()]
    config = VaultConfig(
        owners=owners,
        required=args.required,
        daily_limit=args.daily_limit,
        instance_id=args.instance_id,
    )
    issues = config.validate()
    if issues:
        for issue in issues:
            logger.error(issue)
        return c.ErrorCode
    save_config(config, args.config)
    logger.info(f"Wrote vault config to {args.config}")
    return c.OkCode


def fingerprint(args):
    config = load_config(args.config)
    if config.instance_id is None:
        logger.error("Config has no instance_id; fingerprints are bound to a vault instance")
        return c.ErrorCode
    fp = signing_fingerprint(
        config.instance_id,
        args.target,
        args.value,
        data_from_hex(args.data),
        args.expiry,
        args.sequence_id,
    )
    print(fp)
    return c.OkCode


def sign_fingerprint(args):
    print(sign(args.key, args.fingerprint))
    return c.OkCode


def verify_signature(args):
    valid = verify(args.signer, args.fingerprint, args.signature)
    print("valid" if valid else "invalid")
    return c.OkCode if valid else c.ErrorCode


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level or "INFO")

    commands = {
        'keygen': keygen,
        'init': init,
        'fingerprint': fingerprint,
        'sign': sign_fingerprint,
        'verify': verify_signature,
    }

    if args.command not in commands:
        parser.print_help()
        return c.ErrorCode

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
