from visual_inspector.server.channel import ViewChannel, WebSocketView
from visual_inspector.server.watcher import FileWatcher

__all__ = ["ViewChannel", "WebSocketView", "FileWatcher"]
