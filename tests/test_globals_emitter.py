import io

from ncc16.globals_emitter import (
    GlobalDeclaration,
    GlobalsEmitter,
    Literal,
    ValueType,
)


def emit(emitter, **kwargs):
    out = io.StringIO()
    emitter.emit_at_marker(out, **kwargs)
    return out.getvalue()


def test_integer_literal():
    e = GlobalsEmitter("main")
    e.add(GlobalDeclaration("x", initializer=Literal(ValueType.INT, int_value=42)))
    text = emit(e)
    assert text.startswith("; Global variables placed at _NCC_GLOBAL_LOC\n")
    assert ("; Global variable (program scope): x\n_main_x:\n"
            "    #dw 42 ; Integer value\n\n") in text


def test_char_bool_and_far_pointer_literals():
    e = GlobalsEmitter("m")
    e.add(GlobalDeclaration("c", ValueType.CHAR, Literal(ValueType.CHAR, char_value="A")))
    e.add(GlobalDeclaration("b", ValueType.BOOL, Literal(ValueType.BOOL, int_value=1)))
    e.add(GlobalDeclaration("p", ValueType.INT,
                            Literal(ValueType.FAR_POINTER, segment=32, offset=16),
                            is_far_pointer=True))
    text = emit(e)
    assert "    #db 'A' ; Character value\n\n" in text
    assert "    #db 1 ; Boolean value (true)\n\n" in text
    assert "    #dw 16 ; Offset\n    #dw 32 ; Segment\n\n" in text


def test_other_literal_type_defaults_to_zero():
    e = GlobalsEmitter("m")
    e.add(GlobalDeclaration("s", ValueType.SHORT, Literal(ValueType.SHORT, int_value=7)))
    assert "    #dw 0 ; Default zero initialization\n\n" in emit(e)


def test_zero_initialization_by_type():
    e = GlobalsEmitter("m")
    e.add(GlobalDeclaration("c", ValueType.UNSIGNED_CHAR))
    e.add(GlobalDeclaration("fp", ValueType.INT, is_far_pointer=True))
    e.add(GlobalDeclaration("i", ValueType.INT))
    text = emit(e)
    assert "_m_c:\n    #db 0 ; Zero initialization\n\n" in text
    assert ("_m_fp:\n    #dw 0 ; Offset (zero initialization)\n"
            "    #dw 0 ; Segment (zero initialization)\n\n") in text
    assert "_m_i:\n    #dw 0 ; Zero initialization\n\n" in text


def test_arrays_skipped_and_static_comment():
    e = GlobalsEmitter("m")
    e.add(GlobalDeclaration("arr", is_array=True))
    e.add(GlobalDeclaration("s", is_static=True))
    text = emit(e)
    assert "_m_arr" not in text
    assert "; Static global variable (file scope): s\n_m_s:\n" in text


def test_missing_prefix_uses_unknown():
    e = GlobalsEmitter(None)
    e.add(GlobalDeclaration("x"))
    assert "_unknown_x:\n" in emit(e)


def test_emitted_only_once():
    e = GlobalsEmitter("m")
    e.add(GlobalDeclaration("x"))
    first = emit(e)
    assert "_m_x:" in first
    assert emit(e) == ""
    out = io.StringIO()
    e.emit_remaining(out)
    assert out.getvalue() == ""


def test_nothing_emitted_without_declarations():
    e = GlobalsEmitter("m")
    out = io.StringIO()
    e.emit_remaining(out)
    assert out.getvalue() == "" and emit(e) == ""
    assert e.marker_found is False


def test_emit_remaining_without_marker():
    e = GlobalsEmitter("m")
    e.add(GlobalDeclaration("x"))
    out = io.StringIO()
    e.emit_remaining(out)
    assert out.getvalue().startswith(
        "; Global variables (no _NCC_GLOBAL_LOC marker found)\n"
        "; Global variables placed at _NCC_GLOBAL_LOC\n"
    )
    assert e.marker_found is True


def test_redefine_emits_only_new_unique_globals():
    e = GlobalsEmitter("p")
    e.add(GlobalDeclaration("a"))
    emit(e)
    e.mark_redefine_start()
    e.add(GlobalDeclaration("b"))
    e.add(GlobalDeclaration("a"))
    e.add(GlobalDeclaration("b"))
    text = emit(e, redefine=True)
    assert text.startswith("; Global variables placed at _NCC_GLOBAL_LOC (redefined)\n")
    assert "_p_a:" not in text
    assert text.count("_p_b:") == 1


def test_reset_clears_state():
    e = GlobalsEmitter("m")
    e.add(GlobalDeclaration("x"))
    emit(e)
    e.reset()
    assert e.declarations == [] and e.marker_found is False
    e.add(GlobalDeclaration("y"))
    text = emit(e)
    assert "_m_y:" in text and "_m_x:" not in text