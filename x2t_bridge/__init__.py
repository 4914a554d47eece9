"""x2t-bridge: orchestration layer for the x2t office conversion engine.

WHY: The document editor works on a normalized binary representation
("bin") of office documents. Producing it, and turning edited bins back
into docx/xlsx/pptx/pdf, is done by a prebuilt native engine that only
offers a staged virtual filesystem and one entrypoint. This package
manages that engine and its calling convention.

HOW: Four layers, each independently testable:
  core/          pure helpers (name sanitizing, format tables, params XML)
  engine/        engine protocols, single-flight lifecycle, module loader
  orchestrator   staging, invocation, result and media collection
  editor/ server/ cli   outer surfaces built on the orchestrator

RULES:
- The engine handle is owned by an EngineLifecycle passed in explicitly
- Staging paths and the parameter document are a contract with the engine
- Unsupported formats fail before anything is staged
"""

__version__ = "0.1.0"
