# robopallets

In-memory models of a set of ledger modules for a robot economy. Each module
keeps its own storage in Python objects. It checks the origin of every call
the way a chain runtime would. It records the events it emits in an
`EventLog`, and it raises an exception when it refuses a call.

## Modules

- `robopallets.support`
  - Origins: `signed(account)`, `root()` and `none()`.
  - Origin checks: `ensure_signed`, `ensure_root` and `ensure_none`. Each raises `BadOrigin` when the origin does not match.
  - Errors: `DispatchError` and `PalletError`, which carries the error `variant`.
  - `EventLog`, a list of the events that were deposited.
  - `Timestamp`, a clock in milliseconds that you set yourself.
  - `Balances`, a currency that keeps free and reserved amounts per account.
  - `WeightInfo`, which gives call weights. Every weight is zero by default.
  - `Processing`, `RealWorldOracle`, `Report` and `Agreement`, the abstract interfaces that liabilities build on.
- `robopallets.codec`
  - `encode_compact` and `decode_compact` for compact integers.
  - `encode_u32` and `encode_tuple`.
  - `IPFS`, a technical parameter that holds a 32-byte hash.
  - `SimpleMarket`, an economical parameter that holds a price.
- `robopallets.datalog`
  - `Datalog` keeps a ring buffer of timestamped records for each account. The buffer is built on `RingBufferIndex`.
  - A window of size `n` holds the last `n - 1` records.
  - `erase` clears the log of the account that calls it.
  - `max_record_size` is optional. When set, a longer record raises `DatalogError("RecordTooBig")`.
- `robopallets.launch`
  - `Launch.launch` stores the latest parameter in `goal` and emits `NewLaunch`.
- `robopallets.digital_twin`
  - `DigitalTwin` registers twins and numbers them from 0.
  - The owner of a twin can map 32-byte topics to source accounts.
- `robopallets.xcm_info`
  - `XcmInfo` holds the relay network id.
  - It also links asset ids and locations in both directions, through `convert` and `convert_back`.
  - Only the root origin can change either.
- `robopallets.signed`
  - `Keypair` holds an Ed25519 key. `Keypair.from_uri` derives it deterministically from the SHA-256 of the URI string.
  - `verify_signature`, `agreement_proof` and `report_proof` sign and check proofs.
  - `SignedAgreement` reserves the `SimpleMarket` price when a liability starts. When it finishes with success, the price is paid to the promisor.
  - `SignedReport` confirms every report.
- `robopallets.liability`
  - `Liability.create` checks the agreement proofs, starts the agreement and stores it under the next index.
  - `Liability.finalize` checks the report proof, the sender and whether the agreement was already finalized, then settles the agreement.
  - Refusals raise `LiabilityError` with one of these variants: `BadAgreementProof`, `BadReportProof`, `AlreadyFinalized`, `AgreementNotFound`, `BadReportSender` or `OracleIsNotReady`.
- `robopallets.lighthouse`
  - `Lighthouse` records the block author, which is set through the unsigned `set` call.
  - It issues the block reward in `on_finalize` and forwards fees in `on_nonzero_unbalanced`.
  - `InherentDataProvider`, `create_inherent` and `InherentError` carry the author account in inherent data. That data is a dict keyed by `INHERENT_IDENTIFIER`.
- `robopallets.rws`
  - `RWS` runs subscription auctions. They are started by root, and a winner becomes a subscriber when `on_initialize` rotates the auctions.
  - The oracle can assign subscriptions with `set_subscription`. A subscription is either `Lifetime(tps)` or `Daily(days)`.
  - Linked devices dispatch a `RuntimeCall`. Its weight is paid from the free weight the subscription has accumulated.

## Example

```python
from robopallets.support import Balances, BadOrigin, none, signed
from robopallets.datalog import Datalog

datalog = Datalog(window_size=20)
datalog.record(signed(1), b"datalog")
print(datalog.data(1))  # [RingBufferItem(moment=0, record=b'datalog')]

try:
    datalog.record(none(), b"")
except BadOrigin:
    print("unsigned calls are refused")

balances = Balances({"alice": 100})
balances.reserve("alice", 40)
print(balances.free("alice"), balances.reserved("alice"))  # 60 40
```

A liability between two parties:

```python
from robopallets.codec import IPFS, SimpleMarket
from robopallets.liability import Liability
from robopallets.signed import Keypair, SignedAgreement, agreement_proof
from robopallets.support import Balances, signed

alice, bob = Keypair.from_uri("//Alice"), Keypair.from_uri("//Bob")
balances = Balances({alice.public: 1_000, bob.public: 1_000})
technics, economics = IPFS(bytes(32)), SimpleMarket(100)

agreement = SignedAgreement(
    technics, economics,
    promisee=alice.public, promisor=bob.public,
    promisee_signature=agreement_proof(technics, economics, alice),
    promisor_signature=agreement_proof(technics, economics, bob),
)
liability = Liability(balances)
liability.create(signed(bob.public), agreement)
print(balances.reserved(alice.public))  # 100
```

## What it does not do

Everything lives in memory, inside the objects you create. Nothing is
persisted, and there is no network, no block production and no consensus.
You drive the modules yourself: you call `on_initialize` and `on_finalize`,
and you set the `Timestamp`. The package installs no command-line program.

## Tests

Install with the `test` extra and run `pytest`.