"""Plant Analysis Reporter - Main Application

Gradio application: upload a plant photo, get an analysis from Gemini and
download it as a paginated PDF report.
"""
import logging
import mimetypes
import os
import sys
import tempfile
from pathlib import Path

# Add current directory to path for imports (for HuggingFace Spaces)
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import gradio as gr
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from plant_report import ReportPipeline, ReportRequest
from plant_report.config import DEFAULT_IMAGE_SCALE, SUPPORTED_MIME_TYPES, get_log_level
from plant_report.exceptions import InferenceError
from plant_report.inference import GeminiAnalyzer
from plant_report.storage import ReportStorage

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# Gradio serves files that live inside its cache without copying them
GRADIO_CACHE_DIR = os.getenv("GRADIO_TEMP_DIR") or str(Path(tempfile.gettempdir()) / "gradio")
DOWNLOAD_DIR = os.path.join(GRADIO_CACHE_DIR, "plant_reports")

# Initialize Gemini client
# API key should be set in .env or Space secrets as GEMINI_API_KEY
try:
    analyzer = GeminiAnalyzer()
    logger.info("Gemini analyzer initialized (model %s)", analyzer.model)
except ValueError as e:
    logger.warning("%s", e)
    analyzer = None

pipeline = ReportPipeline(storage=ReportStorage())


def guess_mime_type(image_path: str) -> str:
    mime_type, _ = mimetypes.guess_type(image_path)
    return mime_type or "application/octet-stream"


def analyze_image(image_path: str) -> tuple:
    """
    Send the uploaded photo to the inference service.

    Args:
        image_path: Uploaded file path

    Returns:
        Tuple of (analysis text, image state dict, status message)
    """
    if not image_path:
        raise gr.Error("No image file uploaded")

    if analyzer is None:
        raise gr.Error(
            "Gemini API not configured. "
            "Please set GEMINI_API_KEY environment variable."
        )

    mime_type = guess_mime_type(image_path)
    if mime_type not in SUPPORTED_MIME_TYPES:
        raise gr.Error("Unsupported image format. Please upload a JPEG or PNG image.")

    with open(image_path, "rb") as f:
        image_bytes = f.read()

    try:
        analysis = analyzer.analyze(image_bytes, mime_type)
    except InferenceError as e:
        logger.error("Error analyzing image: %s", e)
        raise gr.Error("An error occurred while analyzing the image")

    image_state = {"bytes": image_bytes, "mime_type": mime_type}
    return analysis, image_state, "✅ Analysis complete"


def download_report(analysis: str, image_state: dict, include_image: bool, scale: float) -> tuple:
    """
    Render the analysis (and photo) as a PDF report.

    Returns:
        Tuple of (report file path, status message)
    """
    image_state = image_state or {}
    request = ReportRequest(
        text=analysis or "",
        image_bytes=image_state.get("bytes") if include_image else None,
        mime_type=image_state.get("mime_type") if include_image else None,
        scale=scale,
    )

    delivered = {}

    def copy_to_download_dir(path: str, filename: str):
        delivered["path"] = ReportStorage.copy_to(path, DOWNLOAD_DIR)

    result = pipeline.export(request, copy_to_download_dir)
    if result.is_failed:
        logger.error("Report failed (%s, HTTP %d): %s", result.error_code, result.http_status, result.error)
        raise gr.Error(result.status_message)

    return gr.update(value=delivered["path"], visible=True), f"✅ {result.status_message}"


# Gradio UI
with gr.Blocks(title="Plant Analysis Reporter", delete_cache=(3600, 3600)) as app:
    gr.Markdown("# 🌿 Plant Analysis Reporter")

    gr.Markdown("""
    Upload a photo of a plant to get a description of its species, health and care,
    then download the analysis as a PDF report.
    """)

    with gr.Row():
        with gr.Column():
            gr.Markdown("## Photo")

            image_input = gr.File(
                label="Upload Plant Image",
                file_types=[".jpg", ".jpeg", ".png"],
                type="filepath"
            )

            analyze_btn = gr.Button(
                "🔍 Analyze the plant",
                variant="primary",
                size="lg"
            )

            gr.Markdown("---")
            gr.Markdown("### ⚙️ Report Settings")

            include_image = gr.Checkbox(
                label="Include photo in report",
                value=True
            )

            image_scale = gr.Slider(
                minimum=0.05,
                maximum=1.0,
                value=DEFAULT_IMAGE_SCALE,
                step=0.05,
                label="Photo scale",
                info="Fraction of the photo's pixel size (default: 0.5). Reduce for very tall photos."
            )

        with gr.Column():
            gr.Markdown("## Analysis")

            analysis_text = gr.Textbox(
                label="Analysis Result",
                lines=16,
                interactive=True
            )

            # Uploaded image bytes and mime type for the report
            image_state = gr.State()

            main_status = gr.Textbox(
                label="Status",
                interactive=False
            )

            download_btn = gr.Button(
                "📄 Download PDF Report",
                variant="secondary"
            )

            report_file = gr.File(
                label="📥 Download Report",
                type="filepath",
                visible=False
            )

    analyze_btn.click(
        fn=analyze_image,
        inputs=[image_input],
        outputs=[analysis_text, image_state, main_status]
    )

    download_btn.click(
        fn=download_report,
        inputs=[analysis_text, image_state, include_image, image_scale],
        outputs=[report_file, main_status]
    )


if __name__ == "__main__":
    app.launch()
