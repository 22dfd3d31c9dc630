"""
TSP Solver - Visualization Module
Plots of point sets, routes and solver progress.
"""

from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np

from tsp_core import Graph, Route


class TSPVisualizer:
    """Visualize TSP routes and optimization progress."""

    def __init__(self, figsize=(12, 8), show: bool = True):
        self.figsize = figsize
        self.show = show

    def _finish(self, fig, save_path: Optional[str], what: str):
        plt.tight_layout()
        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"{what} saved to {save_path}")
        if self.show:
            plt.show()
        else:
            plt.close(fig)
        return fig

    def _draw_route(self, ax, route: Route, graph: Graph, show_arrows: bool = False, labels: bool = False):
        points = route.points(graph)
        x_coords = [p.x for p in points]
        y_coords = [p.y for p in points]

        # Close the loop
        if len(points) >= 2 and not route.is_closed():
            x_coords.append(points[0].x)
            y_coords.append(points[0].y)

        ax.scatter([p.x for p in graph], [p.y for p in graph],
                   c='red', s=150, zorder=3, edgecolors='darkred', linewidth=1.5)
        ax.plot(x_coords, y_coords, 'b-', linewidth=2, alpha=0.6, zorder=1)

        if labels:
            for p in points:
                ax.annotate(p.name or str(p.id), (p.x, p.y),
                            textcoords='offset points', xytext=(6, 6), fontsize=9)

        if show_arrows and len(points) > 1:
            for i in range(len(points)):
                start = points[i]
                end = points[(i + 1) % len(points)]
                mid_x = (start.x + end.x) / 2
                mid_y = (start.y + end.y) / 2
                dx = end.x - start.x
                dy = end.y - start.y
                ax.annotate('',
                            xy=(mid_x + dx * 0.1, mid_y + dy * 0.1),
                            xytext=(mid_x - dx * 0.1, mid_y - dy * 0.1),
                            arrowprops=dict(arrowstyle='->', color='blue', lw=2, alpha=0.7))

        # Highlight start point
        if points:
            ax.scatter([points[0].x], [points[0].y],
                       c='green', s=300, zorder=4, marker='*', edgecolors='darkgreen', linewidth=2)

        ax.grid(True, alpha=0.3)
        ax.set_aspect('equal')

    def plot_points(self, graph: Graph, title: str = "Points", save_path: str = None):
        """Plot the points of a graph without a route."""
        fig, ax = plt.subplots(figsize=self.figsize)
        if graph.is_empty():
            ax.text(0.5, 0.5, 'No points', ha='center', va='center', fontsize=16)
        else:
            for p in graph:
                ax.scatter([p.x], [p.y], c='red', s=150, edgecolors='darkred', linewidth=1.5)
                ax.annotate(p.name or str(p.id), (p.x, p.y),
                            textcoords='offset points', xytext=(6, 6), fontsize=9)
            ax.grid(True, alpha=0.3)
            ax.set_aspect('equal')
        ax.set_title(f"{title}\n{len(graph)} points", fontsize=14, weight='bold')
        return self._finish(fig, save_path, "Points")

    def plot_route(
        self,
        route: Route,
        title: str = "TSP Route",
        show_arrows: bool = True,
        save_path: str = None,
        graph: Optional[Graph] = None
    ):
        """
        Plot a single route.

        Args:
            route: The route to visualize
            title: Plot title
            show_arrows: Show direction arrows on edges
            save_path: Optional path to save the figure
            graph: Graph the route indexes into (defaults to the route's own)
        """
        graph = graph if graph is not None else route.graph
        fig, ax = plt.subplots(figsize=self.figsize)

        if len(route) == 0:
            ax.text(0.5, 0.5, 'No points in route', ha='center', va='center', fontsize=16)
            return self._finish(fig, save_path, "Route")

        self._draw_route(ax, route, graph, show_arrows=show_arrows, labels=True)

        distance = route.get_total_distance(graph)
        ax.set_title(f"{title}\nTotal Distance: {distance:.2f}", fontsize=14, weight='bold')
        ax.set_xlabel('X Coordinate', fontsize=12)
        ax.set_ylabel('Y Coordinate', fontsize=12)
        return self._finish(fig, save_path, "Route")

    def plot_comparison(self, routes: List[Route], titles: List[str], save_path: str = None):
        """Plot several routes side by side."""
        n_routes = len(routes)
        fig, axes = plt.subplots(1, n_routes, figsize=(6 * n_routes, 6))

        if n_routes == 1:
            axes = [axes]

        for ax, route, title in zip(axes, routes, titles):
            if len(route) == 0:
                ax.text(0.5, 0.5, 'No points', ha='center', va='center')
                continue
            self._draw_route(ax, route, route.graph)
            ax.set_title(f"{title}\nDistance: {route.total_distance:.2f}", fontsize=12, weight='bold')

        return self._finish(fig, save_path, "Comparison")

    def plot_convergence(
        self,
        history: List[float],
        title: str = "Convergence History",
        xlabel: str = "Generation/Iteration",
        ylabel: str = "Best Distance",
        save_path: str = None
    ):
        """Plot the best distance per generation (GA) or per pass (2-opt)."""
        fig, ax = plt.subplots(figsize=(10, 6))
        if len(history) == 0:
            ax.text(0.5, 0.5, 'No history recorded', ha='center', va='center', fontsize=16)
            return self._finish(fig, save_path, "Convergence plot")

        steps = np.arange(len(history))
        values = np.asarray(history, dtype=float)
        ax.step(steps, values, where='post', color='b', linewidth=2, label='Best Distance')

        # generations/passes where the best distance dropped
        drops = np.flatnonzero(np.diff(values) < 0) + 1
        if drops.size:
            ax.scatter(drops, values[drops], c='orange', s=40, zorder=3, label=f'Improvements ({drops.size})')

        start_d, end_d = values[0], values[-1]
        gain = (start_d - end_d) / start_d * 100 if start_d else 0.0
        ax.axhline(y=start_d, color='r', linestyle=':', linewidth=1.2, label=f'Start: {start_d:.2f}')
        ax.axhline(y=end_d, color='g', linestyle='--', linewidth=1.2, label=f'End: {end_d:.2f}')

        ax.set(xlabel=xlabel, ylabel=ylabel)
        ax.set_title(f"{title}\nImprovement: {gain:.2f}%", fontsize=14, weight='bold')
        ax.grid(True, alpha=0.3)
        ax.legend(loc='best', fontsize=10)

        return self._finish(fig, save_path, "Convergence plot")

    def plot_multiple_convergence(self, histories: Dict[str, List[float]],
                                  title: str = "Algorithm Comparison", save_path: str = None):
        """Overlay several histories, each normalised to its own starting distance."""
        fig, ax = plt.subplots(figsize=(12, 6))

        cmap = plt.get_cmap('tab10')
        for i, (name, history) in enumerate(histories.items()):
            if len(history) == 0:
                continue
            values = np.asarray(history, dtype=float)
            relative = values / values[0] * 100 if values[0] else values
            ax.step(np.arange(len(values)), relative, where='post', linewidth=2, color=cmap(i % 10),
                    label=f"{name} (final {values[-1]:.2f})")

        ax.set(xlabel='Generation/Iteration', ylabel='Best distance (% of start)')
        ax.set_title(title, fontsize=14, weight='bold')
        ax.grid(True, alpha=0.3)
        ax.legend(loc='best', fontsize=10)

        return self._finish(fig, save_path, "Comparison plot")
