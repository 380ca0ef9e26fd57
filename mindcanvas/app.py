"""Main MindCanvas application."""

import logging
import sys
from pathlib import Path
from typing import Optional

import gi
gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
gi.require_version("Gdk", "4.0")
from gi.repository import Gtk, Gdk, Gio, Adw

from mindcanvas import __version__, __app_id__
from mindcanvas.canvas import MindMapCanvas
from mindcanvas.config import Settings, load_settings
from mindcanvas.engine import MindMapEngine

logger = logging.getLogger(__name__)


class MindCanvasWindow(Adw.ApplicationWindow):
    """Main application window."""

    def __init__(self, app: Adw.Application, settings: Settings):
        super().__init__(application=app)
        self.engine = MindMapEngine(settings)

        # Window setup
        self.set_title("MindCanvas")
        self.set_default_size(1400, 900)

        self._load_css()
        self._build_ui()
        self._setup_shortcuts()
        self._on_view_changed(self.engine.scale)

    def _load_css(self):
        """Load custom CSS theme."""
        css_path = Path(__file__).parent / "theme.css"
        if not css_path.exists():
            return

        css_provider = Gtk.CssProvider()
        css_provider.load_from_path(str(css_path))
        Gtk.StyleContext.add_provider_for_display(
            Gdk.Display.get_default(),
            css_provider,
            Gtk.STYLE_PROVIDER_PRIORITY_APPLICATION
        )

    def _build_ui(self):
        """Build the main UI layout."""
        main_box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)
        main_box.append(self._build_header())

        self.canvas = MindMapCanvas(self.engine)
        self.canvas.on_view_changed = self._on_view_changed

        canvas_frame = Gtk.Frame()
        canvas_frame.set_child(self.canvas)
        canvas_frame.add_css_class("canvas-container")

        # Wrap in toast overlay for in-app notifications
        self.toast_overlay = Adw.ToastOverlay()
        self.toast_overlay.set_child(canvas_frame)
        self.toast_overlay.set_vexpand(True)
        main_box.append(self.toast_overlay)

        self.set_content(main_box)

    def _build_header(self) -> Adw.HeaderBar:
        """Build the header bar."""
        header = Adw.HeaderBar()
        header.add_css_class("flat")

        menu_btn = Gtk.MenuButton()
        menu_btn.set_icon_name("open-menu-symbolic")
        menu_btn.set_tooltip_text("Menu")
        menu = Gio.Menu()
        menu.append("Reset Map", "win.reset")
        menu.append("About MindCanvas", "win.show-about")
        popover = Gtk.PopoverMenu()
        popover.set_menu_model(menu)
        menu_btn.set_popover(popover)
        header.pack_start(menu_btn)

        title = Gtk.Label(label="MindCanvas")
        title.add_css_class("mindcanvas-title")
        subtitle = Gtk.Label(label="Drag ideas to move them, drag the background to pan")
        subtitle.add_css_class("dim-label")
        subtitle.add_css_class("caption")
        title_box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)
        title_box.set_valign(Gtk.Align.CENTER)
        title_box.append(title)
        title_box.append(subtitle)
        header.set_title_widget(title_box)

        reset_btn = Gtk.Button()
        reset_btn.set_icon_name("edit-undo-symbolic")
        reset_btn.set_tooltip_text("Reset Map (Ctrl+R)")
        reset_btn.add_css_class("destructive-action")
        reset_btn.connect("clicked", lambda b: self._confirm_reset())
        header.pack_end(reset_btn)

        zoom_box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=2)
        zoom_box.add_css_class("linked")

        zoom_out_btn = Gtk.Button()
        zoom_out_btn.set_icon_name("zoom-out-symbolic")
        zoom_out_btn.set_tooltip_text("Zoom Out (Ctrl+-)")
        zoom_out_btn.connect("clicked", lambda b: self.canvas.zoom_out())
        zoom_box.append(zoom_out_btn)

        self.scale_label = Gtk.Label()
        self.scale_label.set_width_chars(5)
        self.scale_label.add_css_class("monospace")
        zoom_box.append(self.scale_label)

        zoom_in_btn = Gtk.Button()
        zoom_in_btn.set_icon_name("zoom-in-symbolic")
        zoom_in_btn.set_tooltip_text("Zoom In (Ctrl++)")
        zoom_in_btn.connect("clicked", lambda b: self.canvas.zoom_in())
        zoom_box.append(zoom_in_btn)

        header.pack_end(zoom_box)
        return header

    def _setup_shortcuts(self):
        """Setup keyboard shortcuts."""
        actions = [
            ("zoom-in", lambda: self.canvas.zoom_in(), ["<Control>plus", "<Control>equal"]),
            ("zoom-out", lambda: self.canvas.zoom_out(), ["<Control>minus"]),
            ("reset", self._confirm_reset, ["<Control>r"]),
            ("show-about", self._show_about, None),
            ("quit", lambda: self.close(), ["<Control>q"]),
        ]

        for name, callback, accels in actions:
            action = Gio.SimpleAction.new(name, None)
            action.connect("activate", lambda a, p, cb=callback: cb())
            self.add_action(action)

            if accels:
                self.get_application().set_accels_for_action(f"win.{name}", accels)

    # ==================== Event Handlers ====================

    def _on_view_changed(self, scale: float):
        """Keep the zoom percentage in the header current."""
        self.scale_label.set_label(f"{round(scale * 100)}%")

    def _confirm_reset(self):
        """Ask before throwing away all changes."""
        dialog = Adw.MessageDialog(
            transient_for=self,
            heading="Reset Map?",
            body="All changes to the map will be lost."
        )
        dialog.add_response("cancel", "Cancel")
        dialog.add_response("reset", "Reset")
        dialog.set_response_appearance("reset", Adw.ResponseAppearance.DESTRUCTIVE)
        dialog.set_default_response("cancel")
        dialog.connect("response", self._on_reset_confirmed)
        dialog.present()

    def _on_reset_confirmed(self, dialog, response):
        if response == "reset":
            self.canvas.reset_map()
            self._show_toast("Map reset")

    def _show_about(self):
        """Show about dialog."""
        about = Adw.AboutWindow(
            transient_for=self,
            application_name="MindCanvas",
            application_icon="applications-graphics",
            developer_name="MindCanvas Project",
            version=__version__,
            license_type=Gtk.License.MIT_X11,
            comments="A draggable radial mindmap editor",
        )
        about.present()

    def _show_toast(self, message: str):
        """Show a toast notification."""
        toast = Adw.Toast(title=message)
        toast.set_timeout(3)
        self.toast_overlay.add_toast(toast)


class MindCanvasApp(Adw.Application):
    """Main application class."""

    def __init__(self):
        super().__init__(
            application_id=__app_id__,
            flags=Gio.ApplicationFlags.DEFAULT_FLAGS
        )
        self.settings: Optional[Settings] = None
        self.window: Optional[MindCanvasWindow] = None

    def do_startup(self):
        """Initialize application."""
        Adw.Application.do_startup(self)

        self.settings = load_settings()

        style_manager = Adw.StyleManager.get_default()
        style_manager.set_color_scheme(Adw.ColorScheme.FORCE_DARK)

    def do_activate(self):
        """Activate application."""
        if not self.window:
            self.window = MindCanvasWindow(self, self.settings or Settings())
            logger.info("Window created")

        self.window.present()


def main() -> int:
    """Application entry point."""
    app = MindCanvasApp()
    return app.run(sys.argv)


if __name__ == "__main__":
    sys.exit(main())
