"""Tests for the Qt-facing WFC manager."""

from __future__ import annotations

import numpy as np
import pytest

pytest.importorskip("PyQt6.QtCore")

from model.tileset_manager import TilesetManager  # noqa: E402
from model.wfc_manager import WFCManager  # noqa: E402


@pytest.fixture
def wfc_manager() -> WFCManager:
    return WFCManager(TilesetManager(tile_size=(2, 2)))


def test_samples_changed_signal(wfc_manager: WFCManager) -> None:
    counts: list[int] = []
    wfc_manager.samples_changed.connect(counts.append)

    wfc_manager.add_samples([np.array([[0, 1]]), np.array([[2]])])
    wfc_manager.clear_samples()

    assert counts == [2, 0]
    assert wfc_manager.sample_arrays == []


def test_finished_signal(wfc_manager: WFCManager) -> None:
    results: list[tuple] = []
    wfc_manager.finished.connect(lambda tilemap, tilemap_img: results.append((tilemap, tilemap_img)))
    wfc_manager.add_samples([np.array([[0, 1], [2, 3]])])
    wfc_manager.settings.pattern_size = 2
    wfc_manager.settings.output_width = 3
    wfc_manager.settings.output_height = 2
    wfc_manager.settings.seed = 6

    wfc_manager.generate_tilemap()

    assert len(results) == 1
    tilemap, tilemap_img = results[0]
    assert tilemap.shape == (3, 4)
    assert tilemap_img.size == (8, 6)


def test_failed_signal_without_samples(wfc_manager: WFCManager) -> None:
    messages: list[str] = []
    wfc_manager.failed.connect(messages.append)

    wfc_manager.generate_tilemap()

    assert len(messages) == 1


def test_failed_signal_on_contradiction(wfc_manager: WFCManager) -> None:
    messages: list[str] = []
    wfc_manager.failed.connect(messages.append)
    wfc_manager.add_samples([np.array([[0, 1, 2], [0, 1, 2]])])
    wfc_manager.settings.pattern_size = 2
    wfc_manager.settings.periodic_input = False
    wfc_manager.settings.output_width = 3
    wfc_manager.settings.output_height = 1

    wfc_manager.generate_tilemap()

    assert messages
    assert "No possible patterns left" in messages[0]
