"""
Visualization module for TCO results.
"""

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from .models import ComparisonResult, VehicleType

VEHICLE_COLORS = {
    VehicleType.GASOLINE: '#ef4444',
    VehicleType.DIESEL: '#3b82f6',
    VehicleType.LPG: '#22c55e',
    VehicleType.HYBRID: '#eab308',
    VehicleType.PHEV: '#8b5cf6',
}
DEFAULT_COLOR = '#737373'


def cost_timeline(result: ComparisonResult) -> pd.DataFrame:
    """
    Cumulative cost of each variant for every year of ownership.

    Args:
        result: ComparisonResult object

    Returns:
        DataFrame indexed by year (0..N), one column per vehicle type in ranked order
    """
    years = np.arange(result.years + 1)
    data = {
        r.vehicle_type.value: np.round(r.purchase_price + r.annual_fuel_cost * years).astype(int)
        for r in result.results
    }
    return pd.DataFrame(data, index=pd.Index(years, name='Year'))


def _require_results(result: ComparisonResult):
    if not result.results:
        raise ValueError("Comparison has no results to plot")


def _euro_formatter():
    return plt.FuncFormatter(lambda x, p: f'€{x/1e3:.0f}k')


class TCOVisualizer:
    """Create visualizations for TCO analysis."""

    @staticmethod
    def plot_comparison(result: ComparisonResult, show: bool = True) -> plt.Figure:
        """
        Create TCO comparison visualization.

        Args:
            result: ComparisonResult object
            show: Whether to display the plot

        Returns:
            Matplotlib figure
        """
        _require_results(result)
        fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))
        fig.suptitle(
            f"Total Cost of Ownership over {result.years} years "
            f"({result.distance.total_km:,.0f} km/year)",
            fontsize=16, fontweight='bold'
        )

        # 1. Cumulative costs over time
        timeline = cost_timeline(result)
        for r in result.results:
            ax1.plot(timeline.index, timeline[r.vehicle_type.value], marker='o', linewidth=2,
                     label=r.name, color=VEHICLE_COLORS.get(r.vehicle_type, DEFAULT_COLOR))
        ax1.set_xlabel('Years of use')
        ax1.set_ylabel('Cumulative Cost (€)')
        ax1.set_title('Cumulative Cost Over Time')
        ax1.legend()
        ax1.grid(True, alpha=0.3)
        ax1.yaxis.set_major_formatter(_euro_formatter())

        # 2. Total cost per variant, best option highlighted
        names = [r.name for r in result.results]
        totals = [r.total_cost for r in result.results]
        colors = [VEHICLE_COLORS.get(r.vehicle_type, DEFAULT_COLOR) for r in result.results]
        # Positional bars, display names may repeat
        positions = np.arange(len(names))
        bars = ax2.bar(positions, totals, color=colors)
        ax2.set_xticks(positions)
        ax2.set_xticklabels(names)
        if bars:
            bars[0].set_edgecolor('black')
            bars[0].set_linewidth(2.5)
            ax2.text(0, totals[0], 'Best', ha='center', va='bottom', fontweight='bold')
        ax2.set_ylabel('Total Cost (€)')
        ax2.set_title('Total Cost by Powertrain')
        ax2.tick_params(axis='x', rotation=20)
        ax2.yaxis.set_major_formatter(_euro_formatter())

        plt.tight_layout()
        if show:
            plt.show()

        return fig

    @staticmethod
    def plot_annual_costs(result: ComparisonResult, show: bool = True) -> plt.Figure:
        """
        Plot annual fuel/energy cost per variant.

        Args:
            result: ComparisonResult object
            show: Whether to display the plot

        Returns:
            Matplotlib figure
        """
        _require_results(result)
        fig, ax = plt.subplots(figsize=(10, 6))

        df = result.to_dataframe().set_index('Vehicle')
        colors = [VEHICLE_COLORS.get(r.vehicle_type, DEFAULT_COLOR) for r in result.results]
        df['Annual Fuel Cost'].plot(kind='bar', ax=ax, color=colors)
        ax.set_title('Annual Fuel / Energy Cost')
        ax.set_ylabel('Cost per year (€)')
        ax.set_xlabel('')
        ax.tick_params(axis='x', rotation=20)

        plt.tight_layout()
        if show:
            plt.show()

        return fig
