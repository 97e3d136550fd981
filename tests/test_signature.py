"""
Signature Capture Tests
"""

import pytest
from PIL import Image

from contract_engine.blueprints.store import BlueprintStore
from contract_engine.contracts.lifecycle import ContractStatus
from contract_engine.contracts.store import ContractStore
from contract_engine.signature.capture import (
    DATA_URL_PREFIX,
    SignatureError,
    clear_signature,
    decode_signature,
    encode_signature,
    is_signature_captured,
    render_signature,
)
from contract_engine.storage.snapshots import InMemorySnapshotStore


class TestSignatureCapture:

    def test_render_draws_strokes(self):
        img = render_signature([[(10, 10), (100, 80)], [(200, 20)]], width=300, height=120)

        assert img.size == (300, 120)
        assert img.mode == 'RGBA'
        assert img.getbbox() is not None

    def test_empty_canvas_is_transparent(self):
        img = render_signature([])
        assert img.size == (400, 150)
        assert img.getbbox() is None

    def test_encode_decode(self):
        value = encode_signature(render_signature([[(5, 5), (50, 50)]]))

        assert value.startswith(DATA_URL_PREFIX)
        decoded = decode_signature(value)
        assert decoded.size == (400, 150)
        assert decoded.format == 'PNG'

    def test_encode_accepts_any_pil_image(self):
        value = encode_signature(Image.new('RGB', (20, 10), color='white'))
        assert decode_signature(value).size == (20, 10)

    def test_captured_flag(self):
        assert not is_signature_captured("")
        assert not is_signature_captured(False)
        assert is_signature_captured(DATA_URL_PREFIX + "abc")
        assert clear_signature() == ""

    @pytest.mark.parametrize("value", [
        "",
        "data:image/jpeg;base64,AAAA",
        DATA_URL_PREFIX + "not base64!!",
        DATA_URL_PREFIX + "aGVsbG8=",
    ])
    def test_decode_rejects_invalid_values(self, value):
        with pytest.raises(SignatureError):
            decode_signature(value)


def test_signature_field_value_on_contract():
    snapshots = InMemorySnapshotStore()
    bp = BlueprintStore(snapshots).add_blueprint("NDA", "", [{'type': 'signature', 'label': 'Signature 1'}])
    contracts = ContractStore(snapshots)
    contract = contracts.create_contract("NDA 1", bp)
    field_id = bp.fields[0].id

    assert not is_signature_captured(contract.value_for(field_id))

    value = encode_signature(render_signature([[(10, 100), (120, 30)]]))
    contracts.update_field_values(contract.id, [{'fieldId': field_id, 'value': value}])
    assert decode_signature(contracts.get_contract_by_id(contract.id).value_for(field_id)).size == (400, 150)

    contracts.transition_status(contract.id, ContractStatus.REVOKED)
    contracts.update_field_values(contract.id, [{'fieldId': field_id, 'value': clear_signature()}])
    assert contracts.get_contract_by_id(contract.id).value_for(field_id) == value
