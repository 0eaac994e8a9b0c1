"""
Tests for debt settlement.
"""

from monodeal.game.cards import PropertyColor
from monodeal.game.money import EventLog, EventType, settle
from monodeal.game.player import PlayerState


def _pair():
    return PlayerState(0, "Alice"), PlayerState(1, "Bob")


class TestSettle:
    def test_smallest_cards_paid_first(self, money):
        creditor, debtor = _pair()
        five, two = money(5), money(2)
        debtor.bank = [five, two]
        log = EventLog()

        paid = settle(debtor, creditor, 5, log)

        assert paid == 7
        assert debtor.bank == []
        assert creditor.bank == [two, five]
        payments = [e for e in log.get_events() if e.event_type == EventType.PAYMENT]
        assert [e.details["value"] for e in payments] == [2, 5]
        assert payments[1].details["overpaid"] == 2
        assert payments[0].message == "Bob paid 2M (2M) from bank."

    def test_exact_payment_stops(self, money):
        creditor, debtor = _pair()
        debtor.bank = [money(3), money(1), money(10)]
        paid = settle(debtor, creditor, 4, EventLog())
        assert paid == 4
        assert [c.value for c in debtor.bank] == [10]

    def test_properties_after_bank(self, money, lay):
        creditor, debtor = _pair()
        debtor.bank = [money(1)]
        lay(debtor, PropertyColor.RED, 2)
        log = EventLog()

        paid = settle(debtor, creditor, 3, log)

        assert paid == 1 + 1 + 1
        assert debtor.bank == []
        assert debtor.properties == []
        assert creditor.properties[0].color == PropertyColor.RED
        assert len(creditor.properties[0].cards) == 2
        surrendered = [e for e in log.get_events() if e.event_type == EventType.PROPERTY_SURRENDERED]
        assert len(surrendered) == 2

    def test_first_set_is_drained_first(self, lay):
        creditor, debtor = _pair()
        lay(debtor, PropertyColor.GREEN, 1)
        lay(debtor, PropertyColor.BROWN, 2)
        settle(debtor, creditor, 1, EventLog())
        assert [s.color for s in debtor.properties] == [PropertyColor.BROWN]
        assert [s.color for s in creditor.properties] == [PropertyColor.GREEN]

    def test_broke_debtor_pays_everything(self, money, lay):
        creditor, debtor = _pair()
        debtor.bank = [money(1)]
        lay(debtor, PropertyColor.BROWN, 1)
        paid = settle(debtor, creditor, 10, EventLog())
        assert paid == 2
        assert debtor.total_asset_value == 0
        assert creditor.total_asset_value == 2

    def test_nothing_to_pay_with(self):
        creditor, debtor = _pair()
        log = EventLog()
        assert settle(debtor, creditor, 5, log) == 0
        assert len(log) == 0

    def test_zero_amount(self, money):
        creditor, debtor = _pair()
        debtor.bank = [money(1)]
        assert settle(debtor, creditor, 0, EventLog()) == 0
        assert len(debtor.bank) == 1

    def test_creditor_receives_at_least_the_lesser(self, money, lay):
        """Received value covers min(amount, debtor's total assets)."""
        for amount in range(0, 15):
            creditor, debtor = _pair()
            debtor.bank = [money(1), money(4)]
            lay(debtor, PropertyColor.ORANGE, 2)
            total = debtor.total_asset_value
            settle(debtor, creditor, amount, EventLog())
            assert creditor.total_asset_value >= min(amount, total)
            assert debtor.total_asset_value + creditor.total_asset_value == total
