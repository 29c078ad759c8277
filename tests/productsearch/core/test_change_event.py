"""Tests for decoding CDC change events."""

import json

import pytest

from productsearch.cdc.change_event import Operation, decode_change_event
from productsearch.cdc.payloads import ProductPayload, ProductVariantOptionSetPayload, StockPayload
from productsearch.errors import ChangeEventDecodeError


class TestDecodeChangeEvent:
    def test_decodes_update_from_bytes(self):
        raw = json.dumps({"before": None, "after": {"id": 42, "name": "x"}, "op": "u"}).encode()
        event = decode_change_event(raw, ProductPayload)
        assert event.op is Operation.UPDATE
        assert event.record.id == 42
        assert not event.is_delete

    def test_unwraps_schema_envelope(self):
        raw = json.dumps({"schema": {}, "payload": {"after": {"id": 7}, "op": "c"}})
        assert decode_change_event(raw, ProductPayload).record.id == 7

    def test_delete_uses_before_image(self):
        event = decode_change_event({"before": {"id": 42}, "after": None, "op": "d"}, ProductPayload)
        assert event.is_delete
        assert event.record.id == 42

    def test_snapshot_read_uses_after_image(self):
        event = decode_change_event({"after": {"id": 5}, "op": "r"}, ProductPayload)
        assert event.op is Operation.READ
        assert event.record.id == 5

    def test_source_metadata(self):
        event = decode_change_event(
            {"after": {"id": 5}, "op": "c", "source": {"table": "shopping_product", "txId": 99}}, ProductPayload
        )
        assert event.source.table == "shopping_product"
        assert event.source.tx_id == 99

    def test_column_aliases(self):
        option_set = decode_change_event(
            {"after": {"id": 1, "productvariant_id": 3}, "op": "c"}, ProductVariantOptionSetPayload
        )
        stock = decode_change_event({"after": {"id": 1, "product_variant_id": 4}, "op": "u"}, StockPayload)
        assert option_set.record.variant_id == 3
        assert stock.record.variant_id == 4

    @pytest.mark.parametrize(
        "raw",
        [
            b"{not json",
            "[]",
            {"after": {"id": 1}, "op": "x"},
            {"after": {"name": "no id"}, "op": "c"},
            {"before": None, "after": {"id": 1}, "op": "d"},
            {"before": {"id": 1}, "after": None, "op": "u"},
        ],
    )
    def test_invalid_events_raise(self, raw):
        with pytest.raises(ChangeEventDecodeError):
            decode_change_event(raw, ProductPayload, topic="zelda.public.shopping_product")

    def test_error_carries_topic(self):
        with pytest.raises(ChangeEventDecodeError) as exc_info:
            decode_change_event(b"nope", ProductPayload, topic="t")
        assert exc_info.value.topic == "t"
