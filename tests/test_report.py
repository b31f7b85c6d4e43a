import pytest

from mdreflow.report import Printer, generate_report


def test_none_report():
    assert generate_report('none', 'a', 'b', 'x.md') is None


def test_changed_report():
    assert generate_report('changed', 'a', 'b', 'x.md') == 'x.md'
    assert generate_report('changed', 'a', 'a', 'x.md') is None


def test_state_report():
    assert generate_report('state', 'a', 'b', 'x.md') == 'C:x.md'
    assert generate_report('state', 'a', 'a', 'x.md') == 'U:x.md'


def test_diff_report():
    report = generate_report('diff', 'a\nb\n', 'a\nc\n', 'x.md')
    lines = report.splitlines()
    assert lines[0] == '--- original:x.md'
    assert lines[1] == '+++ processed:x.md'
    assert '-c' in lines
    assert '+b' in lines
    assert generate_report('diff', 'a\n', 'a\n', 'x.md') is None


def test_unknown_report():
    with pytest.raises(ValueError):
        generate_report('loud', 'a', 'b', 'x.md')


def test_printer(capsys):
    with Printer() as printer:
        printer.println('C:x.md')
    assert capsys.readouterr().out == 'C:x.md\n'


def test_printer_with_pager(capfd):
    with Printer('cat') as printer:
        printer.println('first')
        printer.println('second')
    assert capfd.readouterr().out == 'first\nsecond\n'


@pytest.mark.parametrize('mode', ['diff-myers', 'diff-patience', 'diff-lcs'])
def test_named_diffs_are_unified_diffs(mode):
    assert generate_report(mode, 'a\nb\n', 'a\nc\n', 'x.md') == generate_report('diff', 'a\nb\n', 'a\nc\n', 'x.md')
    assert generate_report(mode, 'a\n', 'a\n', 'x.md') is None
