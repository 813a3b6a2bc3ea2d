from __future__ import annotations

from datetime import date

import pytest

from budgetsync.core.config import PayeeSource, TransactionIdField
from budgetsync.errors import (
    AmountParseError,
    NoDateError,
    UnknownTransactionIdFieldError,
)
from budgetsync.mapping import mapper as mapper_module
from budgetsync.mapping.mapper import (
    DefaultMapper,
    NordeaMapper,
    TransactionMapper,
    mapper_for_bank,
    register_bank_mapper,
)
from budgetsync.models.transaction import Account, CanonicalTransaction, RawTransaction


class TestDefaultMapper:
    def test_maps_all_fields(self, account, raw_factory) -> None:
        mapper = DefaultMapper(
            payee_source=[PayeeSource.NAME],
            transaction_id=TransactionIdField.INTERNAL_TRANSACTION_ID,
        )
        raw = raw_factory(creditor_name="Store A/S", debtor_name="John Doe")

        txn = mapper.map(account, raw)

        assert txn == CanonicalTransaction(
            account=account,
            id="abc123",
            date=date(2023, 4, 29),
            payee="Store A/S",
            memo="2023.04.29 Shop",
            amount=-123450,
        )

    def test_transaction_id_field(self, account, raw_factory) -> None:
        mapper = DefaultMapper(
            payee_source=[PayeeSource.NAME],
            transaction_id=TransactionIdField.TRANSACTION_ID,
        )

        txn = mapper.map(account, raw_factory())

        assert txn.id == "txn-1"

    def test_unknown_transaction_id_field(self, account, raw_factory) -> None:
        mapper = DefaultMapper(payee_source=["name"], transaction_id="EntryReference")

        with pytest.raises(UnknownTransactionIdFieldError):
            mapper.map(account, raw_factory())

    def test_payee_uses_parsed_amount_sign(self, account, raw_factory) -> None:
        mapper = DefaultMapper(payee_source=["name"], transaction_id="TransactionId")
        raw = raw_factory(
            amount="250.00", debtor_name="Employer", creditor_name="Me"
        )

        assert mapper.map(account, raw).payee == "Employer"

    def test_bad_amount_raises(self, account, raw_factory) -> None:
        mapper = DefaultMapper(payee_source=["name"], transaction_id="TransactionId")

        with pytest.raises(AmountParseError):
            mapper.map(account, raw_factory(amount="twelve"))

    def test_no_date_raises(self, account, raw_factory) -> None:
        mapper = DefaultMapper(payee_source=["name"], transaction_id="TransactionId")
        raw = raw_factory(
            value_date="", booking_date="", remittance_information_unstructured="x"
        )

        with pytest.raises(NoDateError):
            mapper.map(account, raw)


class TestNordeaMapper:
    def test_fixed_rules(self, account, raw_factory) -> None:
        raw = raw_factory(
            remittance_information_unstructured="2023.04.29 Netto 4411",
            creditor_name="Salling Group",
        )

        txn = NordeaMapper().map(account, raw)

        assert txn.id == "abc123"
        assert txn.payee == "Netto"
        assert txn.memo == "2023.04.29 Netto 4411"
        assert txn.date == date(2023, 4, 29)
        assert txn.amount == -123450


class TestMapperForBank:
    def test_nordea_selected_by_bank_id(self, config_factory) -> None:
        mapper = mapper_for_bank(config_factory(bank_id="NORDEA_NDEADKKK"))

        assert isinstance(mapper, NordeaMapper)

    def test_default_for_unknown_bank(self, config_factory) -> None:
        config = config_factory(bank_id="DANSKEBANK_DABADKKK")

        mapper = mapper_for_bank(config)

        assert isinstance(mapper, DefaultMapper)
        assert list(mapper.payee_source) == [PayeeSource.NAME]
        assert mapper.transaction_id is TransactionIdField.INTERNAL_TRANSACTION_ID

    def test_register_new_bank(self, monkeypatch, config_factory, account) -> None:
        monkeypatch.setattr(
            mapper_module, "_BANK_MAPPERS", dict(mapper_module._BANK_MAPPERS)
        )

        class FixedPayeeMapper:
            def map(
                self, account: Account, raw: RawTransaction
            ) -> CanonicalTransaction:
                return CanonicalTransaction(
                    account=account,
                    id=raw.transaction_id,
                    date=date(2023, 1, 1),
                    payee="Fixed",
                    memo="",
                    amount=0,
                )

        register_bank_mapper("TEST_BANK", lambda _config: FixedPayeeMapper())

        mapper = mapper_for_bank(config_factory(bank_id="TEST_BANK"))

        assert isinstance(mapper, TransactionMapper)
        assert mapper.map(account, RawTransaction(amount="1")).payee == "Fixed"
