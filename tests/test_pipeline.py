"""
Tests for the pipeline executor and the job processor.
"""

import json
import os
import tempfile
import unittest
import uuid
from unittest.mock import patch

from centerline_worker.config import Settings
from centerline_worker.job_processor import process_drawing, process_job
from centerline_worker.pipeline.pipeline_executor import PipelineExecutor


def pt(x, y, z=0.0):
    return {'X': x, 'Y': y, 'Z': z}


def drawing(*layers):
    return {'Layers': list(layers)}


def layer(name, lines=(), polylines=()):
    return {
        'LayerName': name,
        'Lines': [{'Start': s, 'End': e} for s, e in lines],
        'Polylines': list(polylines),
    }


TRAY_LAYER = layer('CABLE_TRAY', lines=[
    (pt(0, 0), pt(10, 0)),
    (pt(0, 1), pt(10, 1)),
    (pt(20, 20), pt(20.1, 20)),
])


class TestPipelineExecutor(unittest.TestCase):
    def setUp(self):
        self.job_id = uuid.uuid4()

    def test_two_edges_give_one_centerline(self):
        executor = PipelineExecutor(self.job_id, 'CABLE_TRAY')
        results = executor.execute_pipeline(drawing(TRAY_LAYER))

        self.assertEqual(
            list(results),
            ['EXTRACT', 'COINCIDENT_DETECT', 'COINCIDENT_SPLIT', 'PARALLEL_PAIRS', 'CENTERLINES']
        )
        self.assertEqual(results['EXTRACT']['rejection_stats']['rejected_short'], 1)
        centerlines = results['CENTERLINES']['centerlines']
        self.assertEqual(len(centerlines), 1)
        self.assertAlmostEqual(centerlines[0].width, 1.0)
        self.assertAlmostEqual(centerlines[0].start[1], 0.5)

        for step in executor.steps.values():
            self.assertEqual(step['status'], 'completed')
            self.assertIsNotNone(step['duration_ms'])

    def test_other_layers_are_ignored(self):
        other = layer('WALLS', lines=[(pt(0, 0.5), pt(10, 0.5))])
        executor = PipelineExecutor(self.job_id, 'CABLE_TRAY')
        results = executor.execute_pipeline(drawing(TRAY_LAYER, other))
        self.assertEqual(results['EXTRACT']['totals']['segments'], 2)

    def test_collinear_touching_segments(self):
        touching = layer('CABLE_TRAY', lines=[(pt(0, 0), pt(5, 0)), (pt(5, 0), pt(10, 0))])
        executor = PipelineExecutor(self.job_id, 'CABLE_TRAY')
        results = executor.execute_pipeline(drawing(touching))
        self.assertEqual(results['COINCIDENT_DETECT']['totals']['coincident_points'], 1)
        self.assertEqual(results['COINCIDENT_SPLIT']['totals']['split_points'], 2)
        self.assertEqual(results['PARALLEL_PAIRS']['pairs'], [])
        self.assertEqual(results['CENTERLINES']['centerlines'], [])

    def test_closed_polyline_outline(self):
        outline = layer('CABLE_TRAY', polylines=[{
            'Vertices': [pt(0, 0), pt(10, 0), pt(10, 1), pt(0, 1)],
            'IsClosed': True,
        }])
        executor = PipelineExecutor(self.job_id, 'CABLE_TRAY')
        results = executor.execute_pipeline(drawing(outline))
        self.assertEqual(results['EXTRACT']['totals']['segments'], 4)
        self.assertEqual(results['COINCIDENT_DETECT']['totals']['coincident_points'], 4)
        widths = sorted(c.width for c in results['CENTERLINES']['centerlines'])
        self.assertEqual(len(widths), 1)
        self.assertAlmostEqual(widths[0], 1.0, places=2)

    def test_rectangle_centerline_independent_of_edge_order(self):
        bottom = (pt(0, 0), pt(10, 0))
        right = (pt(10, 0), pt(10, 1))
        top = (pt(10, 1), pt(0, 1))
        left = (pt(0, 1), pt(0, 0))

        centerlines = []
        for edges in ([bottom, right, top, left], [left, right, bottom, top]):
            executor = PipelineExecutor(self.job_id, 'CABLE_TRAY')
            results = executor.execute_pipeline(drawing(layer('CABLE_TRAY', lines=edges)))
            self.assertEqual(len(results['CENTERLINES']['centerlines']), 1)
            centerlines.append(results['CENTERLINES']['centerlines'][0])

        for centerline in centerlines:
            self.assertAlmostEqual(centerline.start[0], -0.001)
            self.assertAlmostEqual(centerline.end[0], 10.001)
            self.assertAlmostEqual(centerline.length, 10.002)
            self.assertAlmostEqual(centerline.width, 1.0)

    def test_malformed_entities_do_not_fail_the_layer(self):
        messy = dict(TRAY_LAYER)
        messy['Lines'] = TRAY_LAYER['Lines'] + ['abc', {'Start': pt(0, 0), 'End': {'X': 10 ** 400, 'Y': 0}}]
        executor = PipelineExecutor(self.job_id, 'CABLE_TRAY')
        results = executor.execute_pipeline(drawing(messy))
        self.assertEqual(results['EXTRACT']['rejection_stats']['rejected_invalid'], 2)
        self.assertEqual(len(results['CENTERLINES']['centerlines']), 1)

    def test_failing_step_is_marked_and_reraised(self):
        executor = PipelineExecutor(self.job_id, 'CABLE_TRAY')
        with self.assertRaises(Exception):
            executor.execute_pipeline(None)
        self.assertEqual(executor.steps['EXTRACT']['status'], 'failed')
        self.assertIsNotNone(executor.steps['EXTRACT']['error_message'])
        self.assertEqual(executor.steps['CENTERLINES']['status'], 'pending')


class TestProcessDrawing(unittest.TestCase):
    def test_layers_processed_independently(self):
        result = process_drawing(drawing(TRAY_LAYER), ['CABLE_TRAY', 'MISSING'], max_workers=2)

        self.assertEqual(set(result['layers']), {'CABLE_TRAY', 'MISSING'})
        self.assertEqual(result['layers']['MISSING']['centerlines'], [])
        centerline = result['layers']['CABLE_TRAY']['centerlines'][0]
        self.assertAlmostEqual(centerline['Width'], 1.0)
        self.assertAlmostEqual(centerline['WidthMm'], 1000.0)
        self.assertEqual(result['processing_stats']['layers_processed'], 2)
        self.assertEqual(result['processing_stats']['parallel_tasks'], 2)
        self.assertEqual(result['errors'], {})

    def test_width_in_millimeters_follows_unit(self):
        feet_layer = layer('CABLE_TRAY', lines=[(pt(0, 0), pt(30, 0)), (pt(0, 2), pt(30, 2))])
        thresholds = Settings(length_unit='ft').pairing_thresholds()
        result = process_drawing(drawing(feet_layer), ['CABLE_TRAY'],
                                 thresholds=thresholds, length_unit='ft')
        centerline = result['layers']['CABLE_TRAY']['centerlines'][0]
        self.assertAlmostEqual(centerline['WidthMm'], 609.6)

    def test_no_layers(self):
        with self.assertRaises(ValueError):
            process_drawing(drawing(TRAY_LAYER), [])

    @patch('centerline_worker.job_processor.PipelineExecutor.execute_pipeline')
    def test_layer_failure_reported(self, mock_execute):
        mock_execute.side_effect = RuntimeError("boom")
        result = process_drawing(drawing(TRAY_LAYER), ['CABLE_TRAY'])
        self.assertEqual(result['errors'], {'CABLE_TRAY': 'boom'})
        self.assertEqual(result['processing_stats']['processing_errors'], 1)
        self.assertEqual(result['layers'], {})


class TestProcessJob(unittest.TestCase):
    def setUp(self):
        handle, self.path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(handle, 'w', encoding='utf-8') as f:
            json.dump(drawing(TRAY_LAYER), f)

    def tearDown(self):
        os.remove(self.path)

    def test_process_job_from_file(self):
        job_id = str(uuid.uuid4())
        result = process_job(self.path, 'CABLE_TRAY', job_id)
        self.assertEqual(result['job_id'], job_id)
        self.assertEqual(len(result['layers']['CABLE_TRAY']['centerlines']), 1)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            process_job(self.path + '.missing', ['CABLE_TRAY'])
