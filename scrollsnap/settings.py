from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from scrollsnap.types import SnapMode, ThresholdPolicy

PROJECTIONS = ("linear", "decay")


@dataclass
class PredictiveCfg:
    enabled: bool = True
    projection: str = "linear"      # "linear" | "decay"
    multiplier: float = 10.0        # linear: projected = current + delta * multiplier
    friction: float = 0.1           # decay: v *= (1 - friction) per frame
    max_frames: int = 200
    epsilon: float = 0.1            # decay stops once |v| drops below this
    velocity_scale: float = 1.0     # decay: starting velocity = delta * velocity_scale
    zone_fraction: float = 0.25     # look-ahead radius as a fraction of the axis extent
    noise_floor: float = 4.0        # ignore wheel deltas smaller than this
    cooldown_ms: float = 400.0      # min gap between two predictive commits


@dataclass
class SnapCfg:
    mode: SnapMode = SnapMode.MANDATORY
    velocity_threshold: float = 1.0
    debounce_ms: float = 0.0
    duration_ms: Optional[float] = 600.0
    easing: str = "out_cubic"
    lerp: Optional[float] = None                # glide instead of a timed tween
    lockout_cooldown_ms: float = 150.0
    default_threshold: Optional[float] = None   # None -> the axis extent
    threshold_policy: ThresholdPolicy = ThresholdPolicy.HALF
    element_height_threshold: bool = False      # element points fall back to their own length
    clamp_to_limit: bool = True
    predictive: PredictiveCfg = field(default_factory=PredictiveCfg)

    def __post_init__(self):
        self.mode = _enum(SnapMode, self.mode, "mode")
        self.threshold_policy = _enum(ThresholdPolicy, self.threshold_policy, "threshold_policy")
        validate(self)


@dataclass
class HostCfg:
    lerp: float = 0.12              # native smoothing per 60fps frame
    wheel_multiplier: float = 1.0
    wheel_step_px: float = 40.0     # pixels per pygame wheel notch


@dataclass
class WindowCfg:
    width: int = 960
    height: int = 640
    title: str = "scrollsnap"
    bg_rgb: tuple[int, int, int] = (14, 15, 18)


@dataclass
class AppCfg:
    fps: int = 60
    window: WindowCfg = field(default_factory=WindowCfg)
    snap: SnapCfg = field(default_factory=SnapCfg)
    host: HostCfg = field(default_factory=HostCfg)
    blocks: list = field(default_factory=list)  # demo content: [{height, align, threshold?}]


def _enum(cls, value, name: str):
    try:
        return cls(value.lower() if isinstance(value, str) else value)
    except ValueError:
        allowed = ", ".join(m.value for m in cls)
        raise ValueError(f"{name}: {value!r} is not one of {allowed}") from None


def validate(cfg: SnapCfg) -> None:
    """ Reject values the engine cannot work with. """
    if cfg.velocity_threshold < 0:
        raise ValueError("velocity_threshold must be >= 0")
    if cfg.debounce_ms < 0 or cfg.lockout_cooldown_ms < 0:
        raise ValueError("debounce_ms and lockout_cooldown_ms must be >= 0")
    if cfg.duration_ms is not None and cfg.duration_ms < 0:
        raise ValueError("duration_ms must be >= 0")
    if cfg.lerp is not None and not (0.0 < cfg.lerp <= 1.0):
        raise ValueError("lerp must be in (0, 1]")
    if cfg.default_threshold is not None and cfg.default_threshold < 0:
        raise ValueError("default_threshold must be >= 0")
    p = cfg.predictive
    if p.projection not in PROJECTIONS:
        raise ValueError(f"predictive.projection: {p.projection!r} is not one of {', '.join(PROJECTIONS)}")
    if not (0.0 < p.zone_fraction <= 1.0):
        raise ValueError("predictive.zone_fraction must be in (0, 1]")
    if not (0.0 <= p.friction < 1.0):
        raise ValueError("predictive.friction must be in [0, 1)")
    if p.max_frames < 0 or p.noise_floor < 0 or p.cooldown_ms < 0:
        raise ValueError("predictive.max_frames, noise_floor and cooldown_ms must be >= 0")


def _get(d: dict, path: str, default: Any):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _opt_float(v: Any) -> Optional[float]:
    return None if v is None else float(v)


def snap_cfg_from_mapping(data: dict) -> SnapCfg:
    """ Build a SnapCfg from a plain mapping, e.g. the `snap:` section of the YAML. """
    d = SnapCfg()
    p = d.predictive
    return SnapCfg(
        mode=_get(data, "mode", d.mode),
        velocity_threshold=float(_get(data, "velocity_threshold", d.velocity_threshold)),
        debounce_ms=float(_get(data, "debounce_ms", d.debounce_ms)),
        duration_ms=_opt_float(_get(data, "duration_ms", d.duration_ms)),
        easing=str(_get(data, "easing", d.easing)),
        lerp=_opt_float(_get(data, "lerp", d.lerp)),
        lockout_cooldown_ms=float(_get(data, "lockout_cooldown_ms", d.lockout_cooldown_ms)),
        default_threshold=_opt_float(_get(data, "default_threshold", d.default_threshold)),
        threshold_policy=_get(data, "threshold_policy", d.threshold_policy),
        element_height_threshold=bool(_get(data, "element_height_threshold", d.element_height_threshold)),
        clamp_to_limit=bool(_get(data, "clamp_to_limit", d.clamp_to_limit)),
        predictive=PredictiveCfg(
            enabled=bool(_get(data, "predictive.enabled", p.enabled)),
            projection=str(_get(data, "predictive.projection", p.projection)).lower(),
            multiplier=float(_get(data, "predictive.multiplier", p.multiplier)),
            friction=float(_get(data, "predictive.friction", p.friction)),
            max_frames=int(_get(data, "predictive.max_frames", p.max_frames)),
            epsilon=float(_get(data, "predictive.epsilon", p.epsilon)),
            velocity_scale=float(_get(data, "predictive.velocity_scale", p.velocity_scale)),
            zone_fraction=float(_get(data, "predictive.zone_fraction", p.zone_fraction)),
            noise_floor=float(_get(data, "predictive.noise_floor", p.noise_floor)),
            cooldown_ms=float(_get(data, "predictive.cooldown_ms", p.cooldown_ms)),
        ),
    )


def load_settings(path: str = "demo/config/defaults.yaml") -> AppCfg:
    data = {}
    p = Path(path)
    if p.exists():
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    return AppCfg(
        fps=int(_get(data, "fps", 60)),
        window=WindowCfg(
            width=int(_get(data, "window.width", 960)),
            height=int(_get(data, "window.height", 640)),
            title=str(_get(data, "window.title", "scrollsnap")),
            bg_rgb=tuple(_get(data, "window.bg_rgb", (14, 15, 18))),
        ),
        snap=snap_cfg_from_mapping(_get(data, "snap", {}) or {}),
        host=HostCfg(
            lerp=float(_get(data, "host.lerp", 0.12)),
            wheel_multiplier=float(_get(data, "host.wheel_multiplier", 1.0)),
            wheel_step_px=float(_get(data, "host.wheel_step_px", 40.0)),
        ),
        blocks=list(_get(data, "blocks", []) or []),
    )
