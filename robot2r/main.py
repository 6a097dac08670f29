# main.py — interfaz PyQt5 + matplotlib del planificador 2R
import sys
import math
import time
import logging

from PyQt5 import QtCore, QtWidgets
from PyQt5.QtWidgets import QApplication, QMessageBox, QVBoxLayout
import matplotlib
matplotlib.use("Qt5Agg")
from matplotlib.figure import Figure
from matplotlib.patches import Circle
from matplotlib.backends.backend_qt5agg import FigureCanvasQTAgg as FigureCanvas

from robot2r.robot_2r import CartesianPoint, ElbowMode, link_points
from robot2r.session import ArmSession
from robot2r.trajectory import PlanningError, as_arrays, interpolate_pose

logger = logging.getLogger(__name__)

FRAME_MS = 16
GRID_STEP = 0.04  # m

THEMES = {
    "dark": {"bg": "#0f1318", "grid": "#2a313a", "axis": "#6b7280", "text": "#e8eef5"},
    "light": {"bg": "#ffffff", "grid": "#d9dee5", "axis": "#6b7280", "text": "#111827"},
}
COL_L1 = "#3b82f6"
COL_L2 = "#f59e0b"
COL_JOINT = "#111111"
COL_GRIPPER = "#22c55e"
COL_PATH = "#9ca3af"
COL_LIMIT = "#6366f1"


# ---------- Canvas del robot ----------
class RobotCanvas(FigureCanvas):
    def __init__(self, session, parent=None, width=5, height=4, dpi=100):
        self.fig = Figure(figsize=(width, height), dpi=dpi)
        self.ax = self.fig.add_subplot(111)
        super().__init__(self.fig)
        self.setParent(parent)
        self.session = session
        self.theme = THEMES["dark"]

    def _draw_grid(self, rng):
        ax = self.ax
        n = int(rng / GRID_STEP) + 1
        for k in range(-n, n + 1):
            ax.axvline(k * GRID_STEP, color=self.theme["grid"], lw=1, zorder=0)
            ax.axhline(k * GRID_STEP, color=self.theme["grid"], lw=1, zorder=0)
        ax.axhline(0, color=self.theme["axis"], lw=1.5, zorder=1)
        ax.axvline(0, color=self.theme["axis"], lw=1.5, zorder=1)

        # círculo límite (clásico o considerando pinza)
        s = self.session
        r_max = s.reach_radius()
        circle = Circle((0, 0), r_max, fill=False, ls="--", lw=2,
                        color=COL_LIMIT, zorder=1)
        ax.add_patch(circle)
        label = (f"Límite considerando pinza ({r_max:.2f} m)" if s.gripper_offset
                 else f"Límite clásico ({r_max:.2f} m)")
        ax.text(r_max / math.sqrt(2) + 0.01, r_max / math.sqrt(2), label,
                color=COL_LIMIT, fontsize=8, fontweight="bold")

    def draw_arm(self, q1, q2, path=None, target_xy=None):
        """Dibuja el brazo (radianes) y, si hay, la trayectoria."""
        s = self.session
        ax = self.ax
        ax.clear()
        self.fig.set_facecolor(self.theme["bg"])
        ax.set_facecolor(self.theme["bg"])

        rng = s.links.max_reach + s.gripper_length + 0.06
        self._draw_grid(rng)

        (x0, y0), (x1, y1), (x2, y2) = link_points(q1, q2, s.links)
        ax.plot([x0, x1], [y0, y1], color=COL_L1, lw=6, solid_capstyle="round", zorder=3)
        ax.plot([x1, x2], [y1, y2], color=COL_L2, lw=6, solid_capstyle="round", zorder=3)
        ax.plot([x0, x1, x2], [y0, y1, y2], "o", color=COL_JOINT, ms=6, zorder=4)

        # pinza centrada en el efector, orientada según q1+q2
        half = s.gripper_length / 2
        nx, ny = math.cos(q1 + q2), math.sin(q1 + q2)
        ax.plot([x2 - half * nx, x2 + half * nx], [y2 - half * ny, y2 + half * ny],
                color=COL_GRIPPER, lw=5, zorder=5)

        if path:
            if s.gripper_offset and path[0].has_tip:
                xs = [p.xt for p in path]
                ys = [p.yt for p in path]
            else:
                xs = [p.x for p in path]
                ys = [p.y for p in path]
            ax.plot(xs, ys, ls=(0, (6, 6)), lw=2, color=COL_PATH, zorder=2)

        if target_xy is not None:
            ax.plot([target_xy[0]], [target_xy[1]], "rx", zorder=6)

        ax.set_xlim(-rng, rng)
        ax.set_ylim(-rng, rng)
        ax.set_aspect("equal")
        ax.set_xlabel("X (m)", color=self.theme["text"])
        ax.set_ylabel("Y (m)", color=self.theme["text"])
        ax.tick_params(colors=self.theme["text"])
        self.draw_idle()


# ---------- Gráficas articulares ----------
class JointPlotCanvas(FigureCanvas):
    def __init__(self, parent=None, width=5, height=4, dpi=100):
        self.fig = Figure(figsize=(width, height), dpi=dpi)
        self.ax_q1, self.ax_q2 = self.fig.subplots(2, 1, sharex=True)
        super().__init__(self.fig)
        self.setParent(parent)
        self.theme = THEMES["dark"]

    def plot(self, samples):
        t, q1, q2 = as_arrays(samples)
        self.fig.set_facecolor(self.theme["bg"])
        for ax, q, title in ((self.ax_q1, q1, "q1d(t)"), (self.ax_q2, q2, "q2d(t)")):
            ax.clear()
            ax.set_facecolor(self.theme["bg"])
            ax.plot(t, [math.degrees(v) for v in q], lw=2)
            ax.set_title(title, color=self.theme["text"])
            ax.set_ylabel("θ [deg]", color=self.theme["text"])
            ax.grid(True, color=self.theme["grid"])
            ax.tick_params(colors=self.theme["text"])
        self.ax_q2.set_xlabel("t [s]", color=self.theme["text"])
        self.draw_idle()


# ---------- Interfaz principal ----------
class RobotApp(QtWidgets.QMainWindow):
    def __init__(self, session=None):
        super().__init__()
        self.setWindowTitle("Robot 2R — trayectoria quíntica")
        self.session = session or ArmSession()
        self.target_xy = None

        central = QtWidgets.QWidget(self)
        self.setCentralWidget(central)
        layout = QtWidgets.QHBoxLayout(central)

        plots = QtWidgets.QWidget()
        plots_layout = QVBoxLayout(plots)
        self.canvas = RobotCanvas(self.session)
        self.joint_plot = JointPlotCanvas()
        plots_layout.addWidget(self.canvas, 3)
        plots_layout.addWidget(self.joint_plot, 2)
        layout.addWidget(plots, 1)

        # --- controles ---
        controls = QtWidgets.QWidget()
        form = QtWidgets.QFormLayout(controls)
        home = self.session.home
        self.x_widget = QtWidgets.QLineEdit()
        self.x_widget.setPlaceholderText(f"{home.x:.2f}")
        self.y_widget = QtWidgets.QLineEdit()
        self.y_widget.setPlaceholderText(f"{home.y:.2f}")
        form.addRow("X (m):", self.x_widget)
        form.addRow("Y (m):", self.y_widget)

        self.elbow_combo = QtWidgets.QComboBox()
        self.elbow_combo.addItem("Codo arriba", ElbowMode.UP)
        self.elbow_combo.addItem("Codo abajo", ElbowMode.DOWN)
        form.addRow("Codo:", self.elbow_combo)

        self.move_button = QtWidgets.QPushButton("Mover robot")
        self.home_button = QtWidgets.QPushButton("Home")
        self.limit_button = QtWidgets.QPushButton("Límite con pinza")
        self.limit_button.setCheckable(True)
        self.theme_button = QtWidgets.QPushButton("Tema")
        form.addRow(self.move_button)
        form.addRow(self.home_button)
        form.addRow(self.limit_button)

        self.mode_anim = QtWidgets.QRadioButton("Animado")
        self.mode_instant = QtWidgets.QRadioButton("Instantáneo")
        self.mode_anim.setChecked(self.session.animate)
        self.mode_instant.setChecked(not self.session.animate)
        form.addRow(self.mode_anim)
        form.addRow(self.mode_instant)
        form.addRow(self.theme_button)

        self.t1_label = QtWidgets.QLabel()
        self.t2_label = QtWidgets.QLabel()
        self.target_label = QtWidgets.QLabel("Objetivo: -")
        form.addRow(self.t1_label)
        form.addRow(self.t2_label)
        form.addRow(self.target_label)
        layout.addWidget(controls)

        # conectar
        self.move_button.clicked.connect(self.on_move_clicked)
        self.home_button.clicked.connect(self.on_home_clicked)
        self.limit_button.toggled.connect(self.on_limit_toggled)
        self.theme_button.clicked.connect(self.on_theme_clicked)
        self.mode_anim.toggled.connect(self.on_mode_toggled)
        self.x_widget.returnPressed.connect(self.on_move_clicked)
        self.y_widget.returnPressed.connect(self.on_move_clicked)
        self.canvas.mpl_connect("button_press_event", self.on_canvas_click)

        self._timer = QtCore.QTimer(self)
        self._timer.timeout.connect(self._tick)
        self._anim_started = None

        # estado inicial
        self.redraw()

    # --- dibujo ---
    def redraw(self, q1=None, q2=None):
        cur = self.session.current
        q1 = cur.q1 if q1 is None else q1
        q2 = cur.q2 if q2 is None else q2
        self.canvas.draw_arm(q1, q2, self.session.trajectory or None, self.target_xy)
        self.t1_label.setText(f"θ1 = {math.degrees(q1):.2f}°")
        self.t2_label.setText(f"θ2 = {math.degrees(q2):.2f}°")

    def _start(self, samples):
        self.joint_plot.plot(samples)
        t1, t2 = self.session.target_angles_deg()
        self.target_label.setText(f"Objetivo: θ1 = {t1:.2f}°, θ2 = {t2:.2f}°")
        if self.session.animate:
            self._anim_started = time.perf_counter()
            self._timer.start(FRAME_MS)
        else:
            self.session.commit(samples)
            self.redraw()

    def _tick(self):
        samples = self.session.trajectory
        total = samples[-1].t
        t = min(total, time.perf_counter() - self._anim_started)
        q1, q2 = interpolate_pose(samples, t)
        self.redraw(q1, q2)
        if t >= total:
            self._timer.stop()
            self.session.commit(samples)
            logger.info("Animación terminada en q=(%.4f, %.4f)",
                        self.session.current.q1, self.session.current.q2)

    # --- eventos ---
    def _read_target(self):
        x_text = self.x_widget.text() or self.x_widget.placeholderText()
        y_text = self.y_widget.text() or self.y_widget.placeholderText()
        return CartesianPoint(float(x_text), float(y_text))

    def on_move_clicked(self):
        if self._timer.isActive():
            return
        try:
            target = self._read_target()
        except ValueError as e:
            QMessageBox.warning(self, "Entrada inválida", "X e Y deben ser números. " + str(e))
            return

        elbow = self.elbow_combo.currentData()
        try:
            samples = self.session.request_move(target, elbow)
        except PlanningError as e:
            QMessageBox.warning(self, "Fuera de alcance",
                                "El punto deseado está FUERA del espacio de trabajo.\n" + str(e))
            return
        self.target_xy = (target.x, target.y)
        self._start(samples)

    def on_home_clicked(self):
        if self._timer.isActive():
            return
        try:
            samples = self.session.request_home()
        except PlanningError as e:
            QMessageBox.critical(self, "Error Home", str(e))
            return
        self.target_xy = None
        self._start(samples)

    def on_canvas_click(self, event):
        if event.inaxes is not self.canvas.ax or event.xdata is None:
            return
        self.x_widget.setText(f"{event.xdata:.2f}")
        self.y_widget.setText(f"{event.ydata:.2f}")
        self.on_move_clicked()

    def on_limit_toggled(self, checked):
        self.session.set_gripper_offset(checked)
        if not self._timer.isActive():
            self.redraw()

    def on_mode_toggled(self, checked):
        self.session.animate = checked

    def on_theme_clicked(self):
        name = "light" if self.canvas.theme is THEMES["dark"] else "dark"
        self.canvas.theme = self.joint_plot.theme = THEMES[name]
        if self.session.trajectory:
            self.joint_plot.plot(self.session.trajectory)
        if not self._timer.isActive():
            self.redraw()


# ---------- inicio ----------
def main():
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    try:
        window = RobotApp()
        window.show()
        return app.exec_()
    except Exception as e:
        logger.exception("ERROR crítico: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
