# tests/0_independant/test_api_envelopes.py

import json

import dvln.api as mod_api


def test_build_response_envelope_shape() -> None:
    # --- setup ---
    items = [{"toolVersion": "0.0.1"}]

    # --- execute ---
    payload = mod_api.build_response(
        "0.1", "dvlnVersion", "version", "terse", ["toolVersion"], items
    )

    # --- verify ---
    assert payload == {
        "apiVersion": "0.1",
        "context": "dvlnVersion",
        "id": 0,
        "data": {
            "kind": "version",
            "verbosity": "terse",
            "fields": ["toolVersion"],
            "startIndex": 1,
            "totalItems": 1,
            "items": items,
        },
    }


def test_build_response_embeds_note_and_warnings() -> None:
    # --- setup ---
    state = mod_api.ApiState()
    state.set_stored_note(mod_api.new_msg("Temp output logfile: /tmp/x", 101, "note"))
    state.add_stored_warning(mod_api.new_msg("careful", 100, "issue"))

    # --- execute ---
    payload = mod_api.build_response(
        "0.1", "dvlnPkg", "get", "regular", [], [], state=state
    )

    # --- verify ---
    assert payload["note"]["code"] == 101  # noqa: PLR2004
    assert payload["warnings"] == [
        {"message": "careful", "code": 100, "level": "issue"}
    ]
    assert payload["data"]["totalItems"] == 0


def test_build_error_response_has_no_data() -> None:
    # --- setup ---
    state = mod_api.ApiState()
    state.set_stored_note(mod_api.new_msg("n", 101, "note"))
    msg = mod_api.new_msg("bad look", 2004, "issue")

    # --- execute ---
    payload = mod_api.build_error_response("0.1", "dvlnError", msg, state=state)

    # --- verify ---
    assert payload["error"] == msg
    assert payload["id"] == 0
    assert "data" not in payload
    assert "note" not in payload


def test_json_style_raw_is_compact() -> None:
    text = mod_api.JSONStyle(raw=True).render({"a": [1, 2]})
    assert text == '{"a":[1,2]}'


def test_json_style_indent_and_prefix() -> None:
    # --- execute ---
    text = mod_api.JSONStyle(indent=4, prefix="> ").render({"a": 1})

    # --- verify ---
    lines = text.splitlines()
    assert all(line.startswith("> ") for line in lines)
    assert lines[1] == '>     "a": 1'
    assert json.loads("\n".join(line[2:] for line in lines)) == {"a": 1}
