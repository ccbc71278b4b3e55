# Copyright 2026 OpenStack Foundation
# All Rights Reserved.
#
#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

from oslo_utils import units

from swiftseg.common import exception
from swiftseg import slicing
from swiftseg.tests import utils as test_utils


class TestSlicingAlgorithm(test_utils.BaseTestCase):

    def setUp(self):
        super(TestSlicingAlgorithm, self).setUp()
        self.algorithm = slicing.SlicingAlgorithm(
            default_chunk_size=1000000, max_part_count=10)

    def _assert_plan_valid(self, algorithm, content_length):
        plan = algorithm.calculate_plan(content_length)
        self.assertEqual(content_length,
                         plan.chunk_size * plan.part_count + plan.remainder)
        self.assertLessEqual(plan.part_count, algorithm.max_part_count)
        if plan.part_count:
            self.assertLess(plan.remainder, plan.chunk_size)
        return plan

    def test_split_with_remainder(self):
        plan = self.algorithm.calculate_plan(2500000)
        self.assertEqual(slicing.SlicingPlan(1000000, 2, 500000), plan)

    def test_split_evenly(self):
        plan = self.algorithm.calculate_plan(3000000)
        self.assertEqual(slicing.SlicingPlan(1000000, 3, 0), plan)

    def test_no_split_at_threshold(self):
        plan = self.algorithm.calculate_plan(1000000)
        self.assertEqual(slicing.SlicingPlan(1000000, 0, 0), plan)

    def test_split_one_byte_over_threshold(self):
        plan = self.algorithm.calculate_plan(1000001)
        self.assertEqual(slicing.SlicingPlan(1000000, 1, 1), plan)

    def test_no_split_small_payload(self):
        plan = self.algorithm.calculate_plan(1)
        self.assertEqual(slicing.SlicingPlan(1, 0, 0), plan)

    def test_zero_length(self):
        plan = self.algorithm.calculate_plan(0)
        self.assertEqual(0, plan.part_count)
        self.assertEqual(0, plan.remainder)

    def test_chunk_size_grows_past_max_part_count(self):
        # 25 parts at the default size would exceed the bound of 10
        plan = self._assert_plan_valid(self.algorithm, 25000000)
        self.assertEqual(2500000, plan.chunk_size)
        self.assertEqual(10, plan.part_count)
        self.assertEqual(0, plan.remainder)

    def test_chunk_size_grows_with_remainder(self):
        plan = self._assert_plan_valid(self.algorithm, 25000007)
        self.assertEqual(2500001, plan.chunk_size)
        self.assertEqual(9, plan.part_count)
        self.assertEqual(2499998, plan.remainder)

    def test_max_part_count_exactly_reached(self):
        plan = self._assert_plan_valid(self.algorithm, 10000000)
        self.assertEqual(slicing.SlicingPlan(1000000, 10, 0), plan)

    def test_plan_invariants_over_many_lengths(self):
        algorithm = slicing.SlicingAlgorithm(default_chunk_size=7,
                                             max_part_count=3)
        for content_length in range(0, 200):
            self._assert_plan_valid(algorithm, content_length)

    def test_plan_invariants_for_large_lengths(self):
        algorithm = slicing.SlicingAlgorithm()
        for content_length in (5 * units.Gi, 5 * units.Gi + 1,
                               400 * units.Gi - 3, 10 * units.Ti + 17):
            self._assert_plan_valid(algorithm, content_length)

    def test_calculate_plan_is_idempotent(self):
        first = self.algorithm.calculate_plan(123456789)
        second = self.algorithm.calculate_plan(123456789)
        self.assertEqual(first, second)

    def test_defaults(self):
        algorithm = slicing.SlicingAlgorithm()
        self.assertEqual(32 * units.Mi, algorithm.default_chunk_size)
        self.assertEqual(10000, algorithm.max_part_count)
        self.assertIsNone(algorithm.max_part_size)

    def test_negative_length(self):
        self.assertRaises(exception.InvalidArgument,
                          self.algorithm.calculate_plan, -1)

    def test_unknown_length(self):
        self.assertRaises(exception.InvalidArgument,
                          self.algorithm.calculate_plan, None)

    def test_non_integer_length(self):
        self.assertRaises(exception.InvalidArgument,
                          self.algorithm.calculate_plan, 1.5)

    def test_chunk_size_above_max_part_size(self):
        algorithm = slicing.SlicingAlgorithm(default_chunk_size=10,
                                             max_part_count=2,
                                             max_part_size=20)
        self.assertEqual(slicing.SlicingPlan(20, 2, 0),
                         algorithm.calculate_plan(40))
        self.assertRaises(exception.InvalidArgument,
                          algorithm.calculate_plan, 41)

    def test_invalid_default_chunk_size(self):
        self.assertRaises(exception.InvalidArgument,
                          slicing.SlicingAlgorithm, default_chunk_size=0)

    def test_invalid_max_part_count(self):
        self.assertRaises(exception.InvalidArgument,
                          slicing.SlicingAlgorithm, max_part_count=0)

    def test_max_part_size_below_default_chunk_size(self):
        self.assertRaises(exception.InvalidArgument,
                          slicing.SlicingAlgorithm,
                          default_chunk_size=10, max_part_size=5)
