"""Ignore regions delimited by HTML comment directives.

    <!-- mdreflow-ignore-start -->
    left alone
    <!-- mdreflow-ignore-end -->

The prettier-ignore-start/end pair is accepted as well. A directive may share
its comment with other text, e.g. <!-- mdreflow-ignore-start: keep the table -->.
"""

STARTS = ('mdreflow-ignore-start', 'prettier-ignore-start')
ENDS = ('mdreflow-ignore-end', 'prettier-ignore-end')


def is_html_comment(html: str) -> bool:
    return html.startswith('<!--') and (html.endswith('-->') or html.endswith('-->\n'))


def directive(html: str):
    """Return True/False for a comment holding a start/end directive, None otherwise.

    An end directive wins when a comment holds both.
    """
    if not is_html_comment(html):
        return None
    state = None
    if any(start in html for start in STARTS):
        state = True
    if any(end in html for end in ENDS):
        state = False
    return state


class IgnoreByHtmlComment:
    def __init__(self):
        self.ignoring = False

    def process_html(self, html: str):
        state = directive(html)
        if state is not None:
            self.ignoring = state

    def should_be_ignored(self) -> bool:
        return self.ignoring
