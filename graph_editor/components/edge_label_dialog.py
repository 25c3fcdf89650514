"""
Edge Label Dialog Component

Non-blocking prompt opened by double-clicking an edge. The dialog is seeded
with the edge's current label; Save applies it through EdgeLabelPrompt,
Cancel (or closing the dialog) leaves the edge unchanged.
"""

from nicegui import ui
from typing import Callable, Optional

from graph_editor.labels import EdgeLabelPrompt


def render_edge_label_dialog(
    prompt: EdgeLabelPrompt,
    on_done: Optional[Callable[[], None]] = None,
) -> 'ui.dialog':
    """
    Create and return the edge label dialog for the prompt's open edge.

    Args:
        prompt: EdgeLabelPrompt that has already been opened on an edge
        on_done: Callback after the label was applied or the prompt cancelled

    Returns:
        The dialog instance (call dialog.open() to show)
    """
    state = prompt.state
    dialog = ui.dialog()

    def do_cancel():
        prompt.cancel()
        dialog.close()
        if on_done:
            on_done()

    def do_save():
        prompt.accept(label_input.value or '')
        dialog.close()
        if on_done:
            on_done()

    with dialog, ui.card().classes('w-96 bg-slate-900 border border-slate-700'):
        ui.label('Enter edge label:').classes('text-sm text-gray-400')
        label_input = ui.input(value=state.value).classes('w-full').props('outlined dense autofocus')
        label_input.on_value_change(lambda e: prompt.set_value(e.value or ''))
        label_input.on('keydown.enter', do_save)

        with ui.row().classes('w-full justify-end gap-2'):
            ui.button('Cancel', on_click=do_cancel).props('flat color=grey')
            ui.button('OK', on_click=do_save).props('color=primary')

    # Escape / backdrop click closes without a value
    dialog.on('hide', lambda: prompt.cancel() if prompt.state.is_open else None)
    return dialog
