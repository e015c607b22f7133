"""
Main entry point for the doc-preview application.

Launch with ``streamlit run run.py``.
"""
import sys
from pathlib import Path

# Add the project root directory to Python path
project_root = Path(__file__).resolve().parent
sys.path.append(str(project_root))

from doc_preview.api.app import main  # noqa: E402

if __name__ == "__main__":
    main()
