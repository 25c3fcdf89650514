"""
Inline node label input.

A borderless text input floated over the chart at the node being edited.
Typing updates the edit buffer, Enter or leaving the field commits, Escape
discards. All three go through LabelEditSession.
"""

from nicegui import ui
from typing import Callable, Tuple

from graph_editor.labels import LabelEditSession


def render_label_input(
    session: LabelEditSession,
    screen_position: Tuple[float, float],
    on_done: Callable[[], None],
) -> ui.input:
    """
    Create the floating input for the session's active node.

    Args:
        session: LabelEditSession with an active editor
        screen_position: (x, y) chart pixel position of the node center
        on_done: Called after commit or discard (used to remove the input and redraw)
    """
    x, y = screen_position
    state = session.state
    finished = {'done': False}

    def finish(action: Callable):
        if finished['done']:
            return
        finished['done'] = True
        action()
        on_done()

    label_input = ui.input(value=state.buffer).props('dense borderless autofocus input-class="text-center"')
    label_input.classes('fixed z-30 bg-slate-800 text-white rounded px-2')
    label_input.style(f'left: {x - 70}px; top: {y - 14}px; width: 140px;')

    label_input.on_value_change(lambda e: session.type(e.value or ''))
    label_input.on('keydown.enter', lambda: finish(session.commit))
    label_input.on('keydown.escape', lambda: finish(session.discard))
    label_input.on('blur', lambda: finish(session.blur))
    return label_input
