#!/usr/bin/env python3
"""
Configuration loader for measurement conversion scenarios
Handles YAML parsing, validation, and construction of conversion inputs
"""

import yaml
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from pathlib import Path
import logging

from .constants import (
    DEFAULT_FRAME_ORIGIN, DEFAULT_SURFACE_REFRACTIVITY,
    WGS84_FLATTENING, WGS84_SEMI_MAJOR_AXIS
)
from .conversion.geometry import MeasurementGeometry
from .environment import AtmosphericModel
from .validators import (
    ConversionError, ValidationResult, validate_all_parameters, validate_rotation_matrix,
    validate_square_matrix, validate_vector
)

logger = logging.getLogger(__name__)


@dataclass
class AtmosphereConfig:
    """Exponential atmosphere configuration"""
    surface_refractivity: float = DEFAULT_SURFACE_REFRACTIVITY
    decay_constant: Optional[float] = None
    semi_major_axis: float = WGS84_SEMI_MAJOR_AXIS
    flattening: float = WGS84_FLATTENING

    def build(self) -> AtmosphericModel:
        """Create the atmospheric model"""
        return AtmosphericModel(
            surface_refractivity=self.surface_refractivity,
            decay_constant=self.decay_constant,
            semi_major_axis=self.semi_major_axis,
            flattening=self.flattening
        )


@dataclass
class GeometryConfig:
    """Sensor layout configuration"""
    transmitter: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    receiver: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    rotation: Optional[List[List[float]]] = None
    use_half_range: bool = False
    frame_origin_deg: Optional[List[float]] = field(
        default_factory=lambda: list(np.degrees(DEFAULT_FRAME_ORIGIN))
    )


@dataclass
class MeasurementConfig:
    """Cartesian measurement configuration"""
    name: str
    position: List[float]
    sqrt_covariance: List[List[float]]

    def to_dict(self):
        """Convert to dictionary for saving"""
        return {
            'name': self.name,
            'position': [float(v) for v in self.position],
            'sqrt_covariance': [[float(v) for v in row] for row in self.sqrt_covariance]
        }


@dataclass
class ScenarioConfig:
    """Complete conversion scenario configuration"""
    name: str
    description: str
    geometry: GeometryConfig
    atmosphere: AtmosphereConfig
    measurements: List[MeasurementConfig]
    max_workers: int = 1
    output: Optional[Dict] = None

    def build_geometry(self) -> MeasurementGeometry:
        """Create the measurement geometry for this scenario"""
        rotation = self.geometry.rotation if self.geometry.rotation is not None else np.eye(3)
        frame_origin = None
        if self.geometry.frame_origin_deg is not None:
            lat, lon = np.radians(self.geometry.frame_origin_deg)
            frame_origin = (float(lat), float(lon))
        return MeasurementGeometry(
            transmitter=np.asarray(self.geometry.transmitter, dtype=float),
            receiver=np.asarray(self.geometry.receiver, dtype=float),
            rotation=np.asarray(rotation, dtype=float),
            use_half_range=self.geometry.use_half_range,
            atmosphere=self.atmosphere.build(),
            frame_origin=frame_origin
        )

    def measurement_means(self) -> np.ndarray:
        """3xN array of measurement positions"""
        if not self.measurements:
            return np.zeros((3, 0))
        return np.column_stack([np.asarray(m.position, dtype=float) for m in self.measurements])

    def measurement_sqrt_covariances(self) -> np.ndarray:
        """Nx3x3 stack of covariance square roots"""
        if not self.measurements:
            return np.zeros((0, 3, 3))
        return np.stack([np.asarray(m.sqrt_covariance, dtype=float) for m in self.measurements])


class ConfigLoader:
    """Load and validate conversion scenario configurations"""

    def __init__(self, config_dir: str = "configs"):
        """
        Initialize configuration loader

        Args:
            config_dir: Directory containing configuration files
        """
        self.config_dir = Path(config_dir)
        self.scenarios_dir = self.config_dir / "scenarios"

    def load_scenario(self, scenario_name: str) -> ScenarioConfig:
        """
        Load a scenario configuration from YAML

        Args:
            scenario_name: Name of scenario file (with or without .yaml) or
                a path to one

        Returns:
            ScenarioConfig object
        """
        filepath = Path(scenario_name)
        if not filepath.exists():
            if not scenario_name.endswith('.yaml'):
                scenario_name += '.yaml'
            filepath = self.scenarios_dir / scenario_name

        if not filepath.exists():
            raise FileNotFoundError(f"Scenario file not found: {filepath}")

        logger.info(f"Loading scenario: {filepath}")

        with open(filepath, 'r') as f:
            config_dict = yaml.safe_load(f)

        return self.parse_scenario(config_dict)

    def parse_scenario(self, config_dict: Dict) -> ScenarioConfig:
        """Parse scenario dictionary into configuration objects"""
        if not isinstance(config_dict, dict) or 'scenario' not in config_dict:
            raise ConversionError("Scenario configuration needs a 'scenario' section")

        scenario = config_dict['scenario']

        geo_cfg = config_dict.get('geometry', {}) or {}
        geometry = GeometryConfig(
            transmitter=geo_cfg.get('transmitter', [0.0, 0.0, 0.0]),
            receiver=geo_cfg.get('receiver', [0.0, 0.0, 0.0]),
            rotation=geo_cfg.get('rotation'),
            use_half_range=bool(geo_cfg.get('use_half_range', False)),
            frame_origin_deg=geo_cfg.get('frame_origin_deg',
                                         list(np.degrees(DEFAULT_FRAME_ORIGIN)))
        )

        atm_cfg = config_dict.get('atmosphere', {}) or {}
        atmosphere = AtmosphereConfig(
            surface_refractivity=atm_cfg.get('surface_refractivity', DEFAULT_SURFACE_REFRACTIVITY),
            decay_constant=atm_cfg.get('decay_constant'),
            semi_major_axis=atm_cfg.get('semi_major_axis', WGS84_SEMI_MAJOR_AXIS),
            flattening=atm_cfg.get('flattening', WGS84_FLATTENING)
        )

        measurements = []
        for idx, meas_cfg in enumerate(config_dict.get('measurements', []) or []):
            # Either a full square root or per-axis standard deviations
            if 'sqrt_covariance' in meas_cfg:
                sqrt_cov = meas_cfg['sqrt_covariance']
            else:
                std = meas_cfg.get('std', [1.0, 1.0, 1.0])
                if isinstance(std, (int, float)):
                    std = [std, std, std]
                sqrt_cov = np.diag(np.asarray(std, dtype=float)).tolist()

            measurements.append(MeasurementConfig(
                name=meas_cfg.get('name', f"measurement_{idx}"),
                position=meas_cfg['position'],
                sqrt_covariance=sqrt_cov
            ))

        processing = config_dict.get('processing', {}) or {}

        return ScenarioConfig(
            name=scenario['name'],
            description=scenario.get('description', ''),
            geometry=geometry,
            atmosphere=atmosphere,
            measurements=measurements,
            max_workers=int(processing.get('max_workers', 1)),
            output=config_dict.get('output')
        )

    def list_scenarios(self) -> List[str]:
        """List available scenario files"""
        scenarios = []
        for file in self.scenarios_dir.glob("*.yaml"):
            scenarios.append(file.stem)
        return sorted(scenarios)

    def validate_scenario(self, scenario: ScenarioConfig) -> List[str]:
        """
        Validate scenario configuration

        Returns:
            List of validation warnings/errors
        """
        result = ValidationResult(is_valid=True, errors=[], warnings=[])

        atm = scenario.atmosphere
        atm_result = validate_all_parameters(
            atm.surface_refractivity, atm.decay_constant, atm.semi_major_axis, atm.flattening
        )
        for message in atm_result.errors + atm_result.warnings:
            result.add_warning(message)

        geo = scenario.geometry
        checks = [
            (lambda: validate_vector(geo.transmitter, "transmitter")),
            (lambda: validate_vector(geo.receiver, "receiver")),
        ]
        if geo.rotation is not None:
            checks.append(lambda: validate_rotation_matrix(geo.rotation))
        for check in checks:
            try:
                check()
            except ConversionError as e:
                result.add_warning(str(e))

        if not scenario.measurements:
            result.add_warning("Scenario has no measurements")

        for meas in scenario.measurements:
            try:
                position = validate_vector(meas.position, f"{meas.name} position")
                validate_square_matrix(meas.sqrt_covariance, f"{meas.name} sqrt_covariance")
            except ConversionError as e:
                result.add_warning(str(e))
                continue
            if np.array_equal(position, np.asarray(geo.receiver, dtype=float)):
                result.add_warning(f"Measurement {meas.name} lies on the receiver")

        if scenario.max_workers < 1:
            result.add_warning(f"max_workers must be at least 1, got {scenario.max_workers}")

        return result.warnings

    def save_scenario(self, scenario: ScenarioConfig, filename: str):
        """Save scenario configuration to YAML file"""

        if not filename.endswith('.yaml'):
            filename += '.yaml'

        self.scenarios_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.scenarios_dir / filename

        config_dict = {
            'scenario': {
                'name': scenario.name,
                'description': scenario.description
            },
            'geometry': self._geometry_to_dict(scenario.geometry),
            'atmosphere': self._atmosphere_to_dict(scenario.atmosphere),
            'processing': {'max_workers': scenario.max_workers},
            'measurements': [m.to_dict() for m in scenario.measurements]
        }

        if scenario.output:
            config_dict['output'] = scenario.output

        with open(filepath, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Saved scenario to {filepath}")
        return filepath

    def _geometry_to_dict(self, geometry: GeometryConfig) -> Dict[str, Any]:
        """Convert geometry config to dictionary"""
        result = {
            'transmitter': [float(v) for v in geometry.transmitter],
            'receiver': [float(v) for v in geometry.receiver],
            'use_half_range': geometry.use_half_range,
            'frame_origin_deg': (None if geometry.frame_origin_deg is None
                                 else [float(v) for v in geometry.frame_origin_deg])
        }
        if geometry.rotation is not None:
            result['rotation'] = [[float(v) for v in row] for row in geometry.rotation]
        return result

    def _atmosphere_to_dict(self, atmosphere: AtmosphereConfig) -> Dict[str, Any]:
        """Convert atmosphere config to dictionary"""
        return {
            'surface_refractivity': float(atmosphere.surface_refractivity),
            'decay_constant': (None if atmosphere.decay_constant is None
                               else float(atmosphere.decay_constant)),
            'semi_major_axis': float(atmosphere.semi_major_axis),
            'flattening': float(atmosphere.flattening)
        }
