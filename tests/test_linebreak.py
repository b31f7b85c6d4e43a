from mdreflow.detect import BreakCfg, BreakDetector
from mdreflow.linebreak import insert_linebreaks_after_sentence_ends, merge_linebreaks
from mdreflow.whitespace import WhitespaceDetector


def test_linebreak_runs_become_one_space():
    assert merge_linebreaks('a\nb\n\nc', WhitespaceDetector()) == 'a b c'


def test_linebreak_after_nbsp_is_kept():
    assert merge_linebreaks('a\u00a0\nb', WhitespaceDetector()) == 'a\u00a0\nb'


def test_linebreaks_can_be_kept():
    assert merge_linebreaks('a\nb', WhitespaceDetector(keep_linebreaks=True)) == 'a\nb'


def test_sentences_end_up_on_their_own_lines():
    text = 'Some text. It contains sentences.'
    assert insert_linebreaks_after_sentence_ends(text, BreakDetector()) == 'Some text.\nIt contains sentences.'


def test_existing_linebreaks_are_normalized():
    detector = BreakDetector()
    text = 'Some\ntext. It\ncontains sentences.'
    once = insert_linebreaks_after_sentence_ends(text, detector)
    assert once == 'Some text.\nIt contains sentences.'
    assert insert_linebreaks_after_sentence_ends(once, detector) == once


def test_keep_words_prevent_breaks():
    detector = BreakDetector('e.g.')
    text = 'Use e.g. this. Or that.'
    assert insert_linebreaks_after_sentence_ends(text, detector) == 'Use e.g. this.\nOr that.'


def test_nbsp_after_marker_prevents_break():
    text = 'Fig.\u00a01 shows it.'
    assert insert_linebreaks_after_sentence_ends(text, BreakDetector()) == text


def test_kept_linebreaks_survive():
    detector = BreakDetector(cfg=BreakCfg(keep_linebreaks=True))
    assert insert_linebreaks_after_sentence_ends('One\ntwo. Three', detector) == 'One\ntwo.\nThree'
