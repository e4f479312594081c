"""Tests for chat value types."""

from uuid import uuid4

import pytest

from app.schemas.chat import ActorKey, ActorRole, Identity, InboxCounts


def test_actor_role_helpers():
    assert ActorRole.STAFF.is_staff is True
    assert ActorRole.CUSTOMER.is_staff is False
    assert ActorRole.STAFF.other is ActorRole.CUSTOMER
    assert ActorRole.from_is_staff(True) is ActorRole.STAFF


def test_staff_key_requires_account():
    with pytest.raises(ValueError):
        ActorKey(ActorRole.STAFF, None)


def test_customer_key_may_be_anonymous():
    key = ActorKey.customer()
    assert key.account_id is None
    assert key.role is ActorRole.CUSTOMER


def test_actor_keys_are_hashable():
    account_id = uuid4()
    assert ActorKey.staff(account_id) == ActorKey.staff(account_id)
    assert len({ActorKey.staff(account_id), ActorKey.customer(account_id)}) == 2


def test_identity():
    anonymous = Identity()
    assert anonymous.is_authenticated is False
    assert anonymous.actor_key(ActorRole.CUSTOMER) == ActorKey.customer()
    staff = Identity(account_id=uuid4(), is_staff=True)
    assert staff.actor_key(ActorRole.STAFF).account_id == staff.account_id


def test_inbox_counts_reject_negative():
    with pytest.raises(ValueError):
        InboxCounts(total=-1)
