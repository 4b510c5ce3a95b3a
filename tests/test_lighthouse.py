import pytest

from robopallets.lighthouse import (
    INHERENT_IDENTIFIER,
    BlockReward,
    InherentDataProvider,
    InherentError,
    Lighthouse,
    LighthouseError,
    SetLighthouse,
)
from robopallets.support import BadOrigin, Balances, none, root, signed

ALICE = bytes([1]) * 32
BOB = bytes([2]) * 32
REWARD = 1000


@pytest.fixture
def currency():
    return Balances({ALICE: 5000, BOB: 5000})


@pytest.fixture
def pallet(currency):
    return Lighthouse(currency, REWARD)


def test_identifier_is_fixed():
    error = InherentError("fixed")
    assert InherentError.try_from(b"lgthouse", error.encode()) == error


def test_set_requires_unsigned_origin(pallet):
    with pytest.raises(BadOrigin):
        pallet.set(signed(ALICE), ALICE)
    with pytest.raises(BadOrigin):
        pallet.set(root(), ALICE)
    assert pallet.lighthouse is None


def test_set_only_once_per_block(pallet):
    pallet.set(none(), ALICE)
    with pytest.raises(LighthouseError) as info:
        pallet.set(none(), BOB)
    assert info.value.variant == "LighthouseAlreadySet"
    assert pallet.lighthouse == ALICE


def test_on_initialize_clears_lighthouse(pallet):
    pallet.set(none(), ALICE)
    pallet.on_initialize(2)
    assert pallet.lighthouse is None
    pallet.set(none(), BOB)
    assert pallet.lighthouse == BOB


def test_on_initialize_returns_write_weight(currency):
    pallet = Lighthouse(currency, REWARD, write_weight=7)
    assert pallet.on_initialize(1) == 7


def test_on_finalize_rewards_lighthouse(pallet, currency):
    issuance = currency.total_issuance
    pallet.set(none(), ALICE)
    pallet.on_finalize(1)
    assert currency.free(ALICE) == 5000 + REWARD
    assert currency.total_issuance == issuance + REWARD
    assert list(pallet.events) == [BlockReward(ALICE, REWARD)]


def test_on_finalize_without_lighthouse_does_nothing(pallet, currency):
    issuance = currency.total_issuance
    pallet.on_finalize(1)
    assert currency.total_issuance == issuance
    assert len(pallet.events) == 0


def test_inherent_round_trip(pallet):
    data = {}
    InherentDataProvider(BOB).provide_inherent_data(data)
    call = pallet.create_inherent(data)
    assert call == SetLighthouse(BOB)
    assert pallet.is_inherent(call)
    assert pallet.check_inherent(call, data) is None
    pallet.set(none(), call.lighthouse)
    assert pallet.lighthouse == BOB


def test_create_inherent_without_data(pallet):
    assert pallet.create_inherent({}) is None


def test_create_inherent_rejects_short_account(pallet):
    data = {}
    InherentDataProvider(b"\x01\x02").provide_inherent_data(data)
    with pytest.raises(ValueError):
        pallet.create_inherent(data)


def test_provide_inherent_data_only_once():
    data = {}
    InherentDataProvider(ALICE).provide_inherent_data(data)
    with pytest.raises(ValueError):
        InherentDataProvider(BOB).provide_inherent_data(data)


def test_is_inherent_rejects_other_calls(pallet):
    assert pallet.is_inherent("transfer") is False


def test_inherent_error_round_trip():
    error = InherentError("bad lighthouse")
    decoded = InherentError.try_from(INHERENT_IDENTIFIER, error.encode())
    assert decoded == error
    assert decoded.is_fatal_error() is True
    assert str(decoded) == 'Other("bad lighthouse")'


def test_inherent_error_other_identifier():
    error = InherentError("bad lighthouse")
    assert InherentError.try_from(b"timstap0", error.encode()) is None


def test_inherent_error_garbage():
    assert InherentError.try_from(INHERENT_IDENTIFIER, b"\x05") is None
    assert InherentError.try_from(INHERENT_IDENTIFIER, b"") is None


def test_try_handle_error():
    provider = InherentDataProvider(ALICE)
    error = InherentError("oops")
    assert provider.try_handle_error(INHERENT_IDENTIFIER, error.encode()) == error
    assert provider.try_handle_error(b"timstap0", error.encode()) is None


def test_fees_go_to_lighthouse(pallet, currency):
    issuance = currency.total_issuance
    pallet.set(none(), BOB)
    pallet.on_nonzero_unbalanced(300)
    assert currency.free(BOB) == 5300
    assert currency.total_issuance == issuance


def test_fees_burnt_without_lighthouse(pallet, currency):
    issuance = currency.total_issuance
    pallet.on_nonzero_unbalanced(300)
    assert currency.free(ALICE) == 5000
    assert currency.total_issuance == issuance - 300


def test_negative_reward_rejected(currency):
    with pytest.raises(ValueError):
        Lighthouse(currency, -1)