import logging
from functools import partial

import gradio as gr

from json_table_explorer.filters import OPERATORS
from json_table_explorer.handlers import (
    add_filter_handler,
    clear_handler,
    export_filtered_handler,
    export_selected_handler,
    filter_row_state,
    get_settings,
    hide_all_columns_handler,
    load_file_handler,
    load_text_handler,
    remove_filter_handler,
    reset_handler,
    scroll_handler,
    search_handler,
    show_all_columns_handler,
    sort_handler,
    table_select_handler,
    toggle_all_rows_handler,
    update_filter_handler,
    update_filter_operator_handler,
    viewport_handler,
    visible_columns_handler,
)

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# --- UI Definition ---
with gr.Blocks(title="JSON Table Explorer") as demo:
    gr.Markdown("# JSON Table Explorer")
    gr.Markdown("Load a JSON object or array, then search, filter and sort it as a table.")

    # State (the session is created on first use)
    session_state = gr.State()
    filter_rev = gr.State(value=0)

    with gr.Row():
        # Left Panel: Input, query and columns
        with gr.Column(scale=1):
            gr.Markdown("### 1. Load")
            file_input = gr.File(label="Upload JSON File", file_types=[".json"])
            paste_input = gr.Textbox(label="Paste JSON", lines=6, placeholder="Paste your JSON here... (array or object)")
            with gr.Row():
                paste_btn = gr.Button("Load", variant="primary")
                clear_btn = gr.Button("Close", variant="stop")
            status_msg = gr.Textbox(label="Status", interactive=False)

            gr.Markdown("### 2. Query")
            search_box = gr.Textbox(label="Search all fields", placeholder="Search all fields...")
            with gr.Row():
                sort_field = gr.Dropdown(label="Sort by", choices=[], value=None, interactive=True)
                sort_btn = gr.Button("Sort / flip direction")
            with gr.Row():
                add_filter_btn = gr.Button("+ Filter")
                reset_btn = gr.Button("Reset")

            @gr.render(inputs=[session_state, filter_rev], triggers=[filter_rev.change])
            def render_filters(session, _rev):
                if session is None or not session.filters:
                    return

                for spec, show_op1, show_op2 in filter_row_state(session):
                    with gr.Row():
                        field_dd = gr.Dropdown(choices=session.columns, value=spec.field, show_label=False, interactive=True)
                        op_dd = gr.Dropdown(
                            choices=[(label, value) for value, label in OPERATORS],
                            value=spec.operator,
                            show_label=False,
                            interactive=True,
                        )
                        field_dd.change(
                            fn=partial(update_filter_handler, spec.id, "field"),
                            inputs=[field_dd, session_state],
                            outputs=[session_state, *view_components],
                        )
                        op_dd.change(
                            fn=partial(update_filter_operator_handler, spec.id),
                            inputs=[op_dd, session_state, filter_rev],
                            outputs=[session_state, filter_rev, *view_components],
                        )
                        if show_op1:
                            op1 = gr.Textbox(value=spec.operand1, placeholder="value", show_label=False)
                            op1.submit(
                                fn=partial(update_filter_handler, spec.id, "operand1"),
                                inputs=[op1, session_state],
                                outputs=[session_state, *view_components],
                            )
                        if show_op2:
                            op2 = gr.Textbox(value=spec.operand2, placeholder="to", show_label=False)
                            op2.submit(
                                fn=partial(update_filter_handler, spec.id, "operand2"),
                                inputs=[op2, session_state],
                                outputs=[session_state, *view_components],
                            )
                        remove_btn = gr.Button("✕", size="sm")
                        remove_btn.click(
                            fn=partial(remove_filter_handler, spec.id),
                            inputs=[session_state, filter_rev],
                            outputs=[session_state, filter_rev, *view_components],
                        )

            gr.Markdown("### 3. Columns")
            with gr.Row():
                show_all_btn = gr.Button("Show all", size="sm")
                hide_all_btn = gr.Button("Hide all", size="sm")
            column_picker = gr.CheckboxGroup(label="Visible columns", choices=[], value=[])

        # Right Panel: Table, detail and export
        with gr.Column(scale=3):
            row_info = gr.Markdown("No data loaded.")
            with gr.Row():
                scroll_slider = gr.Slider(label="Scroll offset (px)", minimum=0, maximum=1, value=0, step=1, scale=4)
                viewport_input = gr.Number(label="Viewport height (px)", value=settings.viewport_height, precision=0, scale=1)
            click_mode = gr.Radio(choices=["Open detail", "Select rows"], value="Open detail", label="Row click")
            table = gr.Dataframe(label="Rows", interactive=False, wrap=False)
            with gr.Row():
                toggle_all_btn = gr.Button("Select all / none")
                export_btn = gr.Button("Export filtered")
                export_selected_btn = gr.Button("Export selected")
            download_output = gr.File(label="Download Result")
            detail_view = gr.Code(label="Detail View", language="json", interactive=False)

    view_components = [table, row_info, scroll_slider, detail_view]
    loaded_outputs = [session_state, status_msg, search_box, sort_field, column_picker, filter_rev, *view_components]

    file_input.upload(
        fn=load_file_handler,
        inputs=[file_input, session_state, filter_rev],
        outputs=loaded_outputs,
    )

    paste_btn.click(
        fn=load_text_handler,
        inputs=[paste_input, session_state, filter_rev],
        outputs=loaded_outputs,
    )

    clear_btn.click(
        fn=clear_handler,
        inputs=[session_state, filter_rev],
        outputs=loaded_outputs,
    )

    # Every keystroke starts a run; superseded runs return no update.
    search_box.input(
        fn=search_handler,
        inputs=[search_box, session_state],
        outputs=[session_state, *view_components],
        concurrency_limit=None,
        show_progress="hidden",
    )

    sort_btn.click(
        fn=sort_handler,
        inputs=[sort_field, session_state],
        outputs=[session_state, sort_field, *view_components],
    )

    add_filter_btn.click(
        fn=add_filter_handler,
        inputs=[session_state, filter_rev],
        outputs=[session_state, filter_rev, *view_components],
    )

    reset_btn.click(
        fn=reset_handler,
        inputs=[session_state, filter_rev],
        outputs=[session_state, search_box, sort_field, filter_rev, *view_components],
    )

    column_picker.input(
        fn=visible_columns_handler,
        inputs=[column_picker, session_state],
        outputs=[session_state, *view_components],
    )

    show_all_btn.click(
        fn=show_all_columns_handler,
        inputs=[session_state],
        outputs=[session_state, column_picker, *view_components],
    )

    hide_all_btn.click(
        fn=hide_all_columns_handler,
        inputs=[session_state],
        outputs=[session_state, column_picker, *view_components],
    )

    scroll_slider.input(
        fn=scroll_handler,
        inputs=[scroll_slider, session_state],
        outputs=[session_state, *view_components],
        trigger_mode="always_last",
        show_progress="hidden",
    )

    viewport_input.submit(
        fn=viewport_handler,
        inputs=[viewport_input, session_state],
        outputs=[session_state, *view_components],
    )

    table.select(
        fn=table_select_handler,
        inputs=[click_mode, session_state],
        outputs=[session_state, *view_components],
    )

    toggle_all_btn.click(
        fn=toggle_all_rows_handler,
        inputs=[session_state],
        outputs=[session_state, *view_components],
    )

    export_btn.click(
        fn=export_filtered_handler,
        inputs=[session_state],
        outputs=[download_output, status_msg],
    )

    export_selected_btn.click(
        fn=export_selected_handler,
        inputs=[session_state],
        outputs=[download_output, status_msg],
    )

if __name__ == "__main__":
    demo.launch()
