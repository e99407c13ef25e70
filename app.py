import gradio as gr

from listing_sheet.config import load_settings
from listing_sheet.handlers import (
    FORM_HEADERS,
    blank_form,
    handle_add_record,
    handle_clear,
    handle_delete_record,
    handle_export,
    handle_import,
    handle_load_record,
    handle_parse,
    handle_replace_record,
    new_store,
    table_frame,
)
from listing_sheet.table import summary_text

settings = load_settings()
initial_store = new_store(settings.schema_mode)

PLACEHOLDER_TEXT = """Example:
编号：1818781769481982541
段位：黑鹰
...
号主在线时间:上午9点~下午10:30
联系电话:13330779331

(Handles both full-width '：' and half-width ':')"""

# --- UI Definition ---
with gr.Blocks(title="Data Parser & Exporter") as demo:
    gr.Markdown("# Data Parser & Exporter")
    gr.Markdown("Paste, upload, or manually add structured data, then export to Excel instantly.")

    # State
    store_state = gr.State(value=initial_store)

    with gr.Row():
        # Left Panel: Input
        with gr.Column(scale=1):
            gr.Markdown("### 1. Paste Data")
            input_text = gr.Textbox(label="Paste Data Here", lines=12, placeholder=PLACEHOLDER_TEXT)
            parse_btn = gr.Button("Parse & Add to Table", variant="primary")
            status_msg = gr.Textbox(label="Status", interactive=False)

            gr.Markdown("### 2. Import / Export")
            import_file = gr.File(label="Import Excel", file_types=[".xlsx", ".xls"])
            output_filename = gr.Textbox(label="Output Filename (optional)", placeholder=settings.export_file_name)
            export_btn = gr.Button("Export to Excel")
            download_output = gr.File(label="Download Result")

        # Right Panel: Record Editor
        with gr.Column(scale=1):
            gr.Markdown("### 3. Add or Edit a Record")
            record_form = gr.Dataframe(
                value=blank_form(initial_store),
                headers=FORM_HEADERS,
                datatype=["str", "str"],
                col_count=(2, "fixed"),
                interactive=True,
                label="Record",
            )
            with gr.Row():
                new_form_btn = gr.Button("New Form")
                add_btn = gr.Button("Add Record", variant="primary")
            record_number = gr.Number(label="Record #", precision=0, minimum=1)
            with gr.Row():
                load_btn = gr.Button("Load Record")
                save_btn = gr.Button("Save Changes")
                delete_btn = gr.Button("Delete Record", variant="stop")

    gr.Markdown("### 4. Records")
    with gr.Row():
        summary = gr.Markdown(summary_text(len(initial_store)))
        clear_btn = gr.Button("Clear All", variant="stop")
    records_table = gr.Dataframe(value=table_frame(initial_store), interactive=False, wrap=True, label="Records")

    view_outputs = [store_state, records_table, summary]

    parse_btn.click(
        fn=handle_parse,
        inputs=[input_text, store_state],
        outputs=view_outputs + [input_text, status_msg],
    )

    new_form_btn.click(fn=blank_form, inputs=[store_state], outputs=[record_form])

    add_btn.click(
        fn=handle_add_record,
        inputs=[record_form, store_state],
        outputs=view_outputs + [record_form, status_msg],
    )

    load_btn.click(
        fn=handle_load_record,
        inputs=[record_number, store_state],
        outputs=[record_form, status_msg],
    )

    save_btn.click(
        fn=handle_replace_record,
        inputs=[record_number, record_form, store_state],
        outputs=view_outputs + [status_msg],
    )

    delete_btn.click(
        fn=handle_delete_record,
        inputs=[record_number, store_state],
        outputs=view_outputs + [status_msg],
    )

    clear_btn.click(fn=handle_clear, inputs=[store_state], outputs=view_outputs + [status_msg])

    import_file.upload(
        fn=handle_import,
        inputs=[import_file, store_state],
        outputs=view_outputs + [import_file, status_msg],
    )

    export_btn.click(
        fn=handle_export,
        inputs=[store_state, output_filename],
        outputs=[download_output, status_msg],
    )

if __name__ == "__main__":
    demo.launch(server_name=settings.server_name, server_port=settings.server_port)
