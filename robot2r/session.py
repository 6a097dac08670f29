# session.py — estado de la sesión (pose actual y modos), sin globales
import math
import logging

from robot2r.robot_2r import (
    DEFAULT_LINKS, GRIPPER_LENGTH, CartesianPoint, ElbowMode, JointConfiguration,
    inverse_kinematics, is_reachable, reach_limit,
)
from robot2r.trajectory import (
    UnreachableTarget, plan_move, sample_trajectory, with_tip_offset,
)

logger = logging.getLogger(__name__)

# ---------- Parámetros de movimiento ----------
HOME_POINT = CartesianPoint(0.14, 0.14)
DEFAULT_DURATION = 20.0   # s
DEFAULT_DT = 0.05         # s


class ArmSession:
    """Pose actual del brazo + banderas de la interfaz.

    La sesión no se mueve sola: request_move() sólo planifica y muestrea;
    quien ejecuta la trayectoria (animación o modo instantáneo) llama a
    commit() cuando termina.
    """

    def __init__(self, links=DEFAULT_LINKS, gripper_length=GRIPPER_LENGTH,
                 home=HOME_POINT, duration=DEFAULT_DURATION, dt=DEFAULT_DT):
        self.links = links
        self.gripper_length = gripper_length
        self.home = home
        self.duration = duration
        self.dt = dt

        self.gripper_offset = False
        self.animate = True
        self.trajectory = []
        self.last_plan = None

        h = inverse_kinematics(home, links, ElbowMode.UP)
        if not h.reachable:
            raise UnreachableTarget(home)
        self.current = h.configuration

    def request_move(self, target, elbow=ElbowMode.UP):
        if not is_reachable(target, self.links):
            logger.warning("Punto fuera del espacio de trabajo: (%.3f, %.3f)", target.x, target.y)
            raise UnreachableTarget(target)
        plan = plan_move(target, self.current, self.links, self.duration, elbow)
        self.last_plan = plan
        self.trajectory = sample_trajectory(
            plan, self.links, self.dt,
            gripper_offset=self.gripper_offset, gripper_length=self.gripper_length)
        logger.info("Movimiento a (%.3f, %.3f) codo %s: %d muestras",
                    target.x, target.y, ElbowMode.parse(elbow).value, len(self.trajectory))
        return self.trajectory

    def request_home(self):
        return self.request_move(self.home, ElbowMode.UP)

    def commit(self, samples=None):
        """Fija la pose actual en la última muestra de la trayectoria."""
        samples = self.trajectory if samples is None else samples
        if not samples:
            return self.current
        last = samples[-1]
        self.current = JointConfiguration(last.q1, last.q2)
        return self.current

    def set_gripper_offset(self, enabled):
        self.gripper_offset = bool(enabled)
        if self.trajectory:
            self.trajectory = with_tip_offset(
                self.trajectory, self.gripper_offset, self.gripper_length)

    def toggle_gripper_offset(self):
        self.set_gripper_offset(not self.gripper_offset)
        return self.gripper_offset

    def reach_radius(self):
        extra = self.gripper_length if self.gripper_offset else 0.0
        return reach_limit(self.links, extra)

    def target_angles_deg(self):
        """Ángulos objetivo (grados) resueltos por la IK del último plan, o None."""
        if self.last_plan is None:
            return None
        q = self.last_plan.target
        return math.degrees(q.q1), math.degrees(q.q2)
