#!/usr/bin/env python3
"""
Configurable scenario runner for measurement conversion
Loads YAML configurations, converts the measurements into refraction-corrupted
r-u-v coordinates and optionally plots the results
"""

import matplotlib.pyplot as plt
import argparse
import sys
import os
from pathlib import Path
from typing import Dict, Optional
import logging

# Add the repository root to the path
sys.path.append(str(Path(__file__).parent))

from trackgeom.config_loader import ConfigLoader, ScenarioConfig
from trackgeom.conversion import CubatureUncertaintyPropagator, PropagationResult
from trackgeom.validators import ConversionError
from trackgeom.visualization import Visualizer

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


class ScenarioRunner:
    """Run conversion scenarios from configuration files"""

    def __init__(self, config: ScenarioConfig):
        """
        Initialize scenario runner

        Args:
            config: Scenario configuration object
        """
        self.config = config
        self.geometry = config.build_geometry()
        self.propagator = CubatureUncertaintyPropagator(
            self.geometry, max_workers=config.max_workers
        )
        self.result: Optional[PropagationResult] = None

    def run(self) -> PropagationResult:
        """
        Convert every measurement of the scenario

        Returns:
            PropagationResult aligned with the configured measurements
        """
        logger.info(f"Starting scenario: {self.config.name}")
        atmosphere = self.geometry.atmosphere
        logger.info(
            f"Ns={atmosphere.surface_refractivity:g}, ce={atmosphere.decay_constant:.4e} 1/m, "
            f"half range={self.geometry.use_half_range}, "
            f"{'monostatic' if self.geometry.is_monostatic else 'bistatic'}"
        )

        self.result = self.propagator.convert(
            self.config.measurement_means(),
            self.config.measurement_sqrt_covariances()
        )

        logger.info(f"Scenario complete: {self.result.num_measurements - len(self.result.errors)}"
                    f"/{self.result.num_measurements} measurements converted")
        return self.result

    def summary(self) -> Dict[str, Dict]:
        """Per-measurement summary of the last run"""
        summary = {}
        for i, meas in enumerate(self.config.measurements):
            if i in self.result.errors:
                summary[meas.name] = {'error': str(self.result.errors[i])}
                continue
            estimate = self.result.estimate(i)
            summary[meas.name] = {
                'range': float(estimate.mean[0]),
                'u': float(estimate.mean[1]),
                'v': float(estimate.mean[2]),
                'range_std': float(estimate.std[0]),
                'u_std': float(estimate.std[1]),
                'v_std': float(estimate.std[2]),
            }
        return summary

    def visualize_results(self, save_path: Optional[str] = None):
        """Plot the converted estimates"""
        fig = Visualizer().plot_ruv_estimates(
            self.result, title=f"{self.config.name}: converted u-v estimates"
        )
        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
            logger.info(f"Saved plot to {save_path}")
        else:
            plt.show()
        return fig


def main():
    """Main entry point for scenario runner"""

    parser = argparse.ArgumentParser(description='Convert measurements from YAML scenario configs')
    parser.add_argument('scenario', nargs='?', help='Scenario name (without .yaml extension) or path')
    parser.add_argument('--config-dir', default='configs', help='Configuration directory')
    parser.add_argument('--list', action='store_true', help='List available scenarios')
    parser.add_argument('--validate', action='store_true', help='Validate scenario without running')
    parser.add_argument('--output', help='Output directory for plots')
    parser.add_argument('--no-viz', action='store_true', help='Skip visualization')

    args = parser.parse_args()

    loader = ConfigLoader(args.config_dir)

    if args.list:
        print("Available scenarios:")
        for scenario in loader.list_scenarios():
            print(f"  - {scenario}")
        return

    if not args.scenario:
        parser.error("a scenario name is required unless --list is given")

    try:
        config = loader.load_scenario(args.scenario)
        print(f"\nLoaded scenario: {config.name}")
        print(f"Description: {config.description}")

        warnings = loader.validate_scenario(config)
        if warnings:
            print("\nValidation warnings:")
            for warning in warnings:
                print(f"  - {warning}")

        if args.validate:
            print("\nValidation complete.")
            return

        print("\n" + "=" * 60)
        print("Running Scenario")
        print("=" * 60)

        runner = ScenarioRunner(config)
        runner.run()

        print("\n" + "=" * 60)
        print("Results Summary")
        print("=" * 60)
        for name, entry in runner.summary().items():
            if 'error' in entry:
                print(f"  {name}: FAILED ({entry['error']})")
                continue
            print(f"  {name}: r = {entry['range']:.3f} m (std {entry['range_std']:.3f}), "
                  f"u = {entry['u']:.6f} (std {entry['u_std']:.2e}), "
                  f"v = {entry['v']:.6f} (std {entry['v_std']:.2e})")

        if not args.no_viz:
            output_path = None
            if args.output:
                os.makedirs(args.output, exist_ok=True)
                output_path = os.path.join(args.output, f"{config.name}_results.png")
            runner.visualize_results(save_path=output_path)

        print("\nScenario complete!")

    except FileNotFoundError as e:
        print(f"Error: {e}")
        print("Use --list to see available scenarios")
        sys.exit(1)
    except ConversionError as e:
        print(f"Error in scenario configuration: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
