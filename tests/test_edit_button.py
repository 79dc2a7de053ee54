from mavplan.edit_button import EDITING_STYLE, IDLE_STYLE, EditButton


def _recorder():
    calls = []
    return calls, calls.append


def test_standalone_button_starts_idle():
    button = EditButton("a")
    assert button.id == "a"
    assert button.editing is False
    assert button.text == "Edit"
    assert button.style_sheet == IDLE_STYLE


def test_construction_does_not_report():
    started, on_started = _recorder()
    finished, on_finished = _recorder()
    button = EditButton("a", on_started, on_finished)
    assert button.editing is False
    assert button.text == "Edit"
    assert started == []
    assert finished == []
    button.toggle()
    assert started == ["a"]


def test_toggle_starts_editing():
    started, on_started = _recorder()
    button = EditButton("start", on_started=on_started)
    button.toggle()
    assert button.editing is True
    assert button.text == "Finish"
    assert button.style_sheet == EDITING_STYLE
    assert started == ["start"]


def test_toggle_twice_finishes_editing():
    started, on_started = _recorder()
    finished, on_finished = _recorder()
    button = EditButton("goal", on_started, on_finished)
    button.toggle()
    button.toggle()
    assert button.editing is False
    assert button.text == "Edit"
    assert started == ["goal"]
    assert finished == ["goal"]


def test_finish_editing_reports_even_when_idle():
    finished, on_finished = _recorder()
    button = EditButton("a", on_finished=on_finished)
    button.finish_editing()
    assert finished == ["a"]
    assert button.editing is False


def test_style_sheets_differ_between_states():
    button = EditButton("a")
    button.start_editing()
    assert "204, 255, 179" in button.style_sheet
    button.finish_editing()
    assert "255, 255, 204" in button.style_sheet