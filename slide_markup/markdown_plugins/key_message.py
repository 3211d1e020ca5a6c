from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock


def key_message_plugin(md: MarkdownIt):
    """Markdown-it-py plugin for key message lines (``! text``).

    The first key message of a render becomes
    ``<div class="key-message">text</div>``; later ones only take effect as
    plain paragraphs, so a slide never shows more than one. Image syntax
    (``![alt](src)``) is left to the inline image rule.
    """

    def _key_message_block(state: StateBlock, start_line: int, end_line: int, silent: bool):
        # Indented code wins
        if state.sCount[start_line] - state.blkIndent >= 4:
            return False

        src = state.src
        line_start = state.bMarks[start_line] + state.tShift[start_line]
        max_pos = state.eMarks[start_line]

        if line_start + 1 >= max_pos or src[line_start] != "!" or src[line_start + 1] not in " \t":
            return False

        if silent:
            return True

        content = src[line_start + 1:max_pos].strip()
        first = not state.env.get("key_message_seen")
        state.env["key_message_seen"] = True

        if first:
            token = state.push("key_message_open", "div", 1)
            token.attrSet("class", "key-message")
        else:
            token = state.push("paragraph_open", "p", 1)
        token.map = [start_line, start_line + 1]

        inline = state.push("inline", "", 0)
        inline.content = content
        inline.map = [start_line, start_line + 1]
        inline.children = []

        if first:
            state.push("key_message_close", "div", -1)
        else:
            state.push("paragraph_close", "p", -1)

        state.line = start_line + 1
        return True

    # Before paragraph so the marker line is never swallowed as paragraph text
    md.block.ruler.before(
        "paragraph",
        "key_message",
        _key_message_block,
        {"alt": ["paragraph", "reference", "blockquote", "list"]},
    )
