# neotx

Build, serialize and sign Neo N3 transactions in plain Python.

## Install

```
pip install neotx
```

With the test tools:

```
pip install "neotx[test]"
```

## Modules

- `neotx.binary`: `BinaryReader` and `BinaryWriter` for the wire format
  (little-endian integers, variable-length integers and length-prefixed
  byte strings), the fixed-size values `UInt160` and `UInt256`, and the
  helpers `var_size`, `var_bytes_size`, `sha256`, `hash160`,
  `calculate_hash` and `get_sign_data`. Malformed input raises
  `FormatError`, a subclass of `ValueError`.
- `neotx.witness_scope`: the `WitnessScope` flags (`NONE`,
  `CALLED_BY_ENTRY`, `CUSTOM_CONTRACTS`, `CUSTOM_GROUPS`, `GLOBAL`).
- `neotx.attributes`: `HighPriorityAttribute` and
  `OracleResponseAttribute`, the `TransactionAttributeType` and
  `OracleResponseCode` enums, `create_transaction_attribute`,
  `deserialize_attribute` and `attributes_var_size`.
- `neotx.signer`: `Signer` (account, scopes, allowed contracts and groups)
  and `signers_var_size`.
- `neotx.witness`: `Witness`, and functions on secp256r1 keys that build and
  check witnesses: `sign_message`, `verify_signature`,
  `signature_redeem_script`, `multisig_redeem_script`,
  `create_invocation_script`, `create_witness`,
  `create_witness_with_script_hash`, `create_signature_witness`,
  `create_multi_signature_witness`, `verify_signature_witness` and
  `verify_multi_signature_witness`. Private keys are 32 raw bytes; public
  keys are 33-byte compressed points.
- `neotx.transaction`: `Transaction`, with `hash()`, `size()`, `sender()`,
  `fee_per_byte()`, `to_bytes()`, `from_bytes()` and (de)serialization.
  Assigning any field drops the cached hash and size. The module also holds
  the token hashes `NEO_TOKEN` and `GAS_TOKEN` and fee constants.
- `neotx.stack_item_type`: the VM `StackItemType` enum, with
  `StackItemType.from_string`.
- `neotx.nep6`: `NEP6Contract` (base64 script, parameter descriptors,
  `to_json` / `from_json`), `Contract` and `ScryptParameters`.
- `neotx.accounts`: `AccountAndBalance`, `find_paying_accounts`,
  `find_remaining_account_and_balance`, `order_signers` (puts the sender
  first) and `sign_verifiable`.
- `neotx.context`: `ContractParametersContext`, which collects parameters
  and signatures for each script hash of a transaction and turns them into
  witnesses with `get_witnesses()`.

## Example

```python
from neotx.binary import UInt160
from neotx.signer import Signer
from neotx.transaction import Transaction
from neotx.witness_scope import WitnessScope

tx = Transaction()
tx.nonce = 0x01020304
tx.system_fee = 100_000_000
tx.valid_until_block = 5760
tx.signers = [Signer(UInt160(), WitnessScope.CALLED_BY_ENTRY)]
tx.script = bytes([0x11])

raw = tx.to_bytes()
again = Transaction.from_bytes(raw)
assert again.hash() == tx.hash()
```

Reading a transaction that breaks the format, such as one with no signers,
an empty script, a duplicate signer or a negative fee, raises `FormatError`.

Signing a message and checking the witness:

```python
from neotx.witness import create_signature_witness, verify_signature_witness

private_key = bytes(range(1, 33))
witness = create_signature_witness(b"message", private_key)
assert verify_signature_witness(b"message", witness)
```

## What it does not do

The package works offline on bytes and keys only. It has no RPC client, so
it does not fetch balances, block heights or contract states, compute
network fees against a node, or send transactions. It does not read or write
NEP-6 wallet files, hold accounts in a wallet, or import keys from WIF or
NEP-2 strings; `ScryptParameters` only records the parameters. There is no
command-line tool.