"""
Main NiceGUI application for the graph editor.

Renders the graph with ui.echart on a full-screen canvas and provides the
toolbar (Add Node, Clear Graph, Export JSON, Import JSON). All graph state
lives in a per-page GraphEditor; its auto-save writes to the storage backend
chosen in config (NiceGUI per-browser storage by default).

Interaction:
- Click selects, Shift+click adds to the selection
- Ctrl+click a node, then Ctrl+click another to connect them
- Drag a node to move it (the whole selection moves if it is selected)
- Double-click a node to edit its label, an edge to rename it
- Delete removes the selection and every edge touching removed nodes
- Arrow keys nudge the selection, the mouse wheel zooms
- Dragging the background pans the view
"""

import logging
import sys

from dotenv import load_dotenv
from nicegui import app, ui

load_dotenv()

from graph_editor.canvas import REQUESTED_EVENT_KEYS
from graph_editor.components import render_edge_label_dialog, render_label_input
from graph_editor.config import get_settings
from graph_editor.editor import GraphEditor
from graph_editor.graph_viz import GraphVisualizer
from graph_editor.handlers import setup_canvas_handlers
from graph_editor.storage import create_backend

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)


# UI Construction - encapsulated in page function so every tab gets its own editor
@ui.page('/')
async def main_page():
    ui.dark_mode().enable()
    ui.query('body').style('margin: 0; padding: 0; overflow: hidden;')

    storage = create_backend(settings, browser_storage=app.storage.user)
    editor = GraphEditor(storage, storage_key=settings.storage_key,
                         export_filename=settings.export_filename)
    if editor.start():
        logger.info(f"Restored graph: {len(editor.nodes)} nodes, {len(editor.edges)} edges")

    visualizer = GraphVisualizer()

    # We use a container for mutable state to be accessible in closures
    state = {
        'chart': None,
        'label_input': None,
    }

    def get_current_options():
        return visualizer.generate_echarts(
            editor.nodes,
            editor.edges,
            viewport=state['viewport'],
            edit_state=editor.labels.state,
            pending_source=state['connect'].source_id,
        )

    def refresh_chart_ui():
        if state['chart']:
            state['chart'].options.clear()
            state['chart'].options.update(get_current_options())
            state['chart'].update()

    def close_label_input():
        if state['label_input'] is not None:
            state['label_input'].delete()
            state['label_input'] = None
        refresh_chart_ui()

    def open_label_input(node_id: str):
        node = editor.store.get_node(node_id)
        if node is None:
            return
        if state['label_input'] is not None:
            state['label_input'].delete()
        screen = state['viewport'].flow_to_screen(node.position)
        state['label_input'] = render_label_input(editor.labels, screen, on_done=close_label_input)

    def open_edge_dialog(edge_id: str):
        render_edge_label_dialog(editor.edge_prompt, on_done=refresh_chart_ui).open()

    handlers = setup_canvas_handlers(
        state=state,
        editor=editor,
        refresh_chart_ui=refresh_chart_ui,
        open_label_input=open_label_input,
        open_edge_dialog=open_edge_dialog,
        notify=ui.notify,
    )

    # Global keyboard handler (ignores keys typed into inputs)
    ui.keyboard(on_key=handlers['handle_keyboard'])

    # --- Layout Construction ---

    # 1. Full Screen Chart
    state['chart'] = ui.echart(get_current_options())
    state['chart'].style('width: 100vw; height: 100vh; position: absolute; top: 0; left: 0; z-index: 0;')
    state['chart'].on('chart:click', handlers['handle_chart_click'], REQUESTED_EVENT_KEYS)
    state['chart'].on('chart:dblclick', handlers['handle_chart_dblclick'], REQUESTED_EVENT_KEYS)
    state['chart'].on('chart:mousedown', handlers['handle_chart_mouse_down'], REQUESTED_EVENT_KEYS)
    state['chart'].on('mousedown', handlers['handle_mouse_down'], ['offsetX', 'offsetY'])
    state['chart'].on('mouseup', handlers['handle_mouse_up'], ['offsetX', 'offsetY'])
    state['chart'].on('wheel', handlers['handle_wheel'], ['deltaY'])

    # 2. Floating Toolbar
    def do_export():
        ui.download(editor.export_json().encode('utf-8'), editor.persistence.export_filename, 'application/json')

    def handle_upload(e):
        handlers['do_import'](e.content.read())
        upload.reset()

    with ui.row().classes('fixed top-4 left-4 z-10 bg-slate-900/90 p-3 rounded shadow-md backdrop-blur-sm items-center gap-2 border border-slate-700'):
        ui.icon('hub', size='md').classes('text-primary')
        ui.label('Graph Editor').classes('text-lg font-bold leading-none text-white')
        ui.separator().props('vertical')

        ui.button('Add Node', icon='add_circle', on_click=handlers['do_add_node']).props('flat dense color=primary')
        ui.button('Clear Graph', icon='delete_sweep', on_click=handlers['do_clear']).props('flat dense color=negative')
        ui.button('Export JSON', icon='download', on_click=do_export).props('flat dense color=primary')
        upload = ui.upload(label='Import JSON', auto_upload=True, on_upload=handle_upload) \
            .props('accept=.json flat dense hide-upload-btn') \
            .classes('w-48')

    ui.label('Ctrl+click two nodes to connect · Double-click to rename · Delete removes selection') \
        .classes('fixed bottom-4 left-4 z-10 text-xs text-gray-400')

    # Size the viewport to the browser window so Add Node lands in the middle
    await ui.context.client.connected()
    try:
        width, height = await ui.run_javascript('return [window.innerWidth, window.innerHeight];')
        state['viewport'] = state['viewport'].resized(width, height).fit(editor.nodes)
    except (TypeError, ValueError, TimeoutError) as e:
        logger.warning(f"Could not read window size, keeping default viewport: {e}")
    refresh_chart_ui()


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title='Graph Editor',
        port=settings.port,
        reload=not getattr(sys, 'frozen', False),
        storage_secret='graph_editor_secret_key',
    )
