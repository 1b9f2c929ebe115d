"""
Outer document workflow: rectify, save, upload.
"""

from src.pipeline.document_workflow import DocumentWorkflow, WorkflowResult

__all__ = ["DocumentWorkflow", "WorkflowResult"]
