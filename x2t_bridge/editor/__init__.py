"""Editor integration: event handling and outbound commands."""

from x2t_bridge.editor.session import EditorChannel, EditorCommand, EditorDocument, EditorSession

__all__ = ["EditorChannel", "EditorCommand", "EditorDocument", "EditorSession"]
