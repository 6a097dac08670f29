# robot2r — planificación de movimiento para un brazo planar de dos eslabones
from robot2r.robot_2r import (
    DEFAULT_LINKS, GRIPPER_LENGTH, REACH_TOLERANCE, CartesianPoint, ElbowMode, IKSolution,
    JointConfiguration, LinkLengths, forward_kinematics, inverse_kinematics, is_reachable,
)
from robot2r.trajectory import (
    InvalidDuration, InvalidTimeStep, MotionPlan, PlanningError, QuinticProfile,
    TrajectorySample, UnreachableTarget, evaluate, fit_quintic, plan_move, sample_trajectory,
)
from robot2r.session import ArmSession

__version__ = "0.1.0"
