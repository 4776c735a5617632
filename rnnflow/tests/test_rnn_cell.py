#  Copyright 2015-present Scikit Flow Authors. All Rights Reserved.
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

import numpy as np
import tensorflow.compat.v1 as tf

from rnnflow import rnn_cell
from rnnflow.modes import Mode


class RNNCellTest(tf.test.TestCase):

    def testBasicRNNCell(self):
        with tf.Graph().as_default(), tf.Session() as sess:
            with tf.variable_scope("root", initializer=tf.constant_initializer(0.5)):
                x = tf.placeholder(tf.float32, [1, 2])
                m = tf.placeholder(tf.float32, [1, 2])
                g, _ = rnn_cell.BasicRNNCell(2)(x, m)
                sess.run(tf.global_variables_initializer())
                res = sess.run(g, {x: [[1., 1.]], m: [[0.1, 0.1]]})
        # Every unit sees 0.5 * (1 + 1 + 0.1 + 0.1) and a zero bias.
        self.assertAllClose(res, np.tanh([[1.1, 1.1]]))

    def testGRUCell(self):
        with tf.Graph().as_default(), tf.Session() as sess:
            with tf.variable_scope("root", initializer=tf.constant_initializer(0.5)):
                x = tf.placeholder(tf.float32, [1, 2])
                m = tf.placeholder(tf.float32, [1, 2])
                g, _ = rnn_cell.GRUCell(2)(x, m)
                sess.run(tf.global_variables_initializer())
                res = sess.run(g, {x: [[1., 1.]], m: [[0.1, 0.1]]})
        # Smoke test
        self.assertAllClose(res, [[0.175991, 0.175991]])

    def testBasicLSTMCell(self):
        with tf.Graph().as_default(), tf.Session() as sess:
            with tf.variable_scope("root", initializer=tf.constant_initializer(0.5)):
                x = tf.placeholder(tf.float32, [1, 2])
                m = tf.constant(0.1, shape=[1, 2])
                state = (rnn_cell.LSTMState(m, m), rnn_cell.LSTMState(m, m))
                cell = rnn_cell.StackedCell([rnn_cell.BasicLSTMCell(2),
                                             rnn_cell.BasicLSTMCell(2)])
                g, out_m = cell(x, state)
                sess.run(tf.global_variables_initializer())
                res = sess.run([g, out_m], {x: [[1., 1.]]})
        # The numbers in results were not calculated, this is just a smoke test.
        self.assertAllClose(res[0], [[0.24024698, 0.24024698]])
        self.assertAllClose(res[1][0].c, [[0.68967271, 0.68967271]])
        self.assertAllClose(res[1][0].h, [[0.44848421, 0.44848421]])
        self.assertAllClose(res[1][1].c, [[0.39897051, 0.39897051]])
        self.assertAllClose(res[1][1].h, [[0.24024698, 0.24024698]])

    def testCallReturnsTuple(self):
        with tf.Graph().as_default():
            x = tf.zeros([3, 2])
            cell = rnn_cell.BasicRNNCell(4)
            result = cell(x, cell.zero_state(3, tf.float32))
            self.assertIsInstance(result, rnn_cell.Tuple)
            self.assertEqual(result.output.get_shape().as_list(), [3, 4])
            forwarded = cell.forward(rnn_cell.Tuple(x, result.state))
            self.assertIsInstance(forwarded, rnn_cell.Tuple)
            self.assertEqual(forwarded.state.get_shape().as_list(), [3, 4])

    def testZeroState(self):
        with tf.Graph().as_default(), tf.Session() as sess:
            cell = rnn_cell.BasicLSTMCell(3)
            static = cell.zero_state(2, tf.float32)
            batch_size = tf.placeholder(tf.int32, [])
            dynamic = cell.zero_state(batch_size, tf.float32)
            self.assertIsInstance(static, rnn_cell.LSTMState)
            self.assertEqual(static.c.get_shape().as_list(), [2, 3])
            self.assertEqual(dynamic.h.get_shape().as_list(), [None, 3])
            res = sess.run(dynamic, {batch_size: 4})
        self.assertAllEqual(res.c, np.zeros([4, 3]))
        self.assertAllEqual(res.h, np.zeros([4, 3]))

    def testCreateCellIsCached(self):
        with tf.Graph().as_default():
            cell = rnn_cell.GRUCell(4)
            self.assertFalse(cell.built)
            self.assertIs(cell.create_cell(Mode.INFERENCE, [None, 7, 3]), cell)
            num_variables = len(tf.global_variables())
            self.assertEqual(num_variables, 4)
            cell.create_cell(Mode.TRAINING, [None, 3])
            self.assertEqual(len(tf.global_variables()), num_variables)
            self.assertTrue(cell.built)
            # Later creations keep the parameters but rebind the mode.
            self.assertEqual(cell.mode, Mode.TRAINING)
            names = sorted(v.op.name for v in tf.global_variables())
        self.assertEqual(names, ["GRUCell/Candidate/Bias",
                                 "GRUCell/Candidate/Matrix",
                                 "GRUCell/Gates/Bias",
                                 "GRUCell/Gates/Matrix"])

    def testCreateCellRejectsOtherDepth(self):
        with tf.Graph().as_default():
            cell = rnn_cell.BasicRNNCell(4)
            cell.create_cell(Mode.TRAINING, [None, 3])
            with self.assertRaises(ValueError):
                cell.create_cell(Mode.TRAINING, [None, 5])

    def testCreateCellRejectsUnknownDepth(self):
        with tf.Graph().as_default():
            with self.assertRaises(ValueError):
                rnn_cell.BasicRNNCell(4).create_cell(Mode.TRAINING, [None, None])

    def testCreateCellRejectsUnknownMode(self):
        with tf.Graph().as_default():
            with self.assertRaises(ValueError):
                rnn_cell.BasicRNNCell(4).create_cell("predict", [None, 3])

    def testDropoutWrapperInference(self):
        with tf.Graph().as_default(), tf.Session() as sess:
            with tf.variable_scope("root", initializer=tf.constant_initializer(0.5)):
                x = tf.placeholder(tf.float32, [1, 2])
                m = tf.placeholder(tf.float32, [1, 2])
                cell = rnn_cell.DropoutWrapper(rnn_cell.BasicRNNCell(2),
                                               input_keep_prob=0.5,
                                               output_keep_prob=0.5)
                cell.create_cell(Mode.INFERENCE, x.get_shape())
                g, new_m = cell(x, m)
                sess.run(tf.global_variables_initializer())
                res = sess.run([g, new_m], {x: [[1., 1.]], m: [[0.1, 0.1]]})
        self.assertAllClose(res[0], np.tanh([[1.1, 1.1]]))
        self.assertAllClose(res[1], np.tanh([[1.1, 1.1]]))

    def testDropoutWrapperTraining(self):
        with tf.Graph().as_default(), tf.Session() as sess:
            x = tf.ones([100, 3])
            cell = rnn_cell.DropoutWrapper(rnn_cell.BasicRNNCell(50),
                                           output_keep_prob=0.5, seed=1)
            g, new_m = cell(x, cell.zero_state(100, tf.float32))
            self.assertEqual(cell.mode, Mode.TRAINING)
            sess.run(tf.global_variables_initializer())
            output, state = sess.run([g, new_m])
        # Dropout zeroes outputs but never touches the state.
        self.assertTrue(np.any(output == 0.0))
        self.assertFalse(np.all(state == output))

    def testDropoutWrapperModeFollowsCreation(self):
        with tf.Graph().as_default():
            inner = rnn_cell.BasicRNNCell(3)
            cell = rnn_cell.DropoutWrapper(inner, output_keep_prob=0.5)
            cell.create_cell(Mode.TRAINING, [None, 2])
            self.assertEqual(inner.mode, Mode.TRAINING)
            num_variables = len(tf.global_variables())
            cell.create_cell(Mode.INFERENCE, [None, 2])
            self.assertEqual(cell.mode, Mode.INFERENCE)
            self.assertEqual(inner.mode, Mode.INFERENCE)
            self.assertEqual(len(tf.global_variables()), num_variables)
            names = sorted(v.op.name for v in tf.global_variables())
        self.assertEqual(names, ["DropoutWrapper/BasicRNNCell/Bias",
                                 "DropoutWrapper/BasicRNNCell/Matrix"])

    def testDropoutWrapperValidation(self):
        with self.assertRaises(TypeError):
            rnn_cell.DropoutWrapper("not a cell")
        with self.assertRaises(ValueError):
            rnn_cell.DropoutWrapper(rnn_cell.BasicRNNCell(2),
                                    input_keep_prob=1.5)
        with self.assertRaises(ValueError):
            rnn_cell.DropoutWrapper(rnn_cell.BasicRNNCell(2),
                                    output_keep_prob=-0.1)


class StackedCellTest(tf.test.TestCase):

    def testStateSizesFollowCellOrder(self):
        cells = [rnn_cell.BasicRNNCell(2), rnn_cell.GRUCell(3),
                 rnn_cell.BasicLSTMCell(4)]
        cell = rnn_cell.StackedCell(cells)
        self.assertEqual(cell.state_size,
                         (2, 3, rnn_cell.LSTMState(4, 4)))
        self.assertEqual(cell.output_size, 4)
        self.assertEqual(cell.cells, tuple(cells))

    def testStatesOnePerCellInOrder(self):
        with tf.Graph().as_default():
            sizes = [2, 3, 5, 4]
            cell = rnn_cell.StackedCell(
                [rnn_cell.BasicRNNCell(size) for size in sizes])
            x = tf.zeros([6, 7])
            output, state = cell(x, cell.zero_state(6, tf.float32))
            self.assertEqual(output.get_shape().as_list(), [6, 4])
            self.assertIsInstance(state, tuple)
            self.assertEqual(len(state), len(sizes))
            self.assertEqual([s.get_shape().as_list() for s in state],
                             [[6, size] for size in sizes])

    def testOutputFeedsNextCell(self):
        with tf.Graph().as_default(), tf.Session() as sess:
            with tf.variable_scope("root", initializer=tf.constant_initializer(0.5)):
                x = tf.placeholder(tf.float32, [1, 2])
                m = tf.constant(0.1, shape=[1, 2])
                cell = rnn_cell.StackedCell([rnn_cell.BasicRNNCell(2),
                                             rnn_cell.BasicRNNCell(2)])
                output, state = cell(x, (m, m))
                sess.run(tf.global_variables_initializer())
                res = sess.run([output, state], {x: [[1., 1.]]})
        first = np.tanh(1.1)
        second = np.tanh(0.5 * (2 * first + 0.2))
        self.assertAllClose(res[1][0], [[first, first]])
        self.assertAllClose(res[1][1], [[second, second]])
        self.assertAllClose(res[0], res[1][1])

    def testSingleCellMatchesCell(self):
        with tf.Graph().as_default(), tf.Session() as sess:
            x = tf.placeholder(tf.float32, [2, 3])
            m = tf.placeholder(tf.float32, [2, 4])
            cell = rnn_cell.GRUCell(4)
            direct = cell(x, m)
            stacked = rnn_cell.StackedCell([cell])(x, (m,))
            sess.run(tf.global_variables_initializer())
            feed = {x: np.random.randn(2, 3), m: np.random.randn(2, 4)}
            res_direct, res_stacked = sess.run([direct, stacked], feed)
        self.assertAllClose(res_direct.output, res_stacked.output)
        self.assertAllClose(res_direct.state, res_stacked.state[0])

    def testForwardOnTuple(self):
        with tf.Graph().as_default():
            cell = rnn_cell.StackedCell([rnn_cell.BasicRNNCell(3),
                                         rnn_cell.BasicLSTMCell(5)])
            x = tf.zeros([2, 4])
            result = cell.forward(
                rnn_cell.Tuple(x, cell.zero_state(2, tf.float32)))
            self.assertIsInstance(result, rnn_cell.Tuple)
            self.assertEqual(result.output.get_shape().as_list(), [2, 5])
            self.assertIsInstance(result.state[1], rnn_cell.LSTMState)

    def testVariableScopes(self):
        with tf.Graph().as_default():
            cell = rnn_cell.StackedCell([rnn_cell.BasicRNNCell(3),
                                         rnn_cell.BasicRNNCell(3)])
            cell(tf.zeros([2, 4]), cell.zero_state(2, tf.float32))
            names = sorted(v.op.name for v in tf.global_variables())
        self.assertEqual(names, ["StackedCell/Cell0/BasicRNNCell/Bias",
                                 "StackedCell/Cell0/BasicRNNCell/Matrix",
                                 "StackedCell/Cell1/BasicRNNCell/Bias",
                                 "StackedCell/Cell1/BasicRNNCell/Matrix"])

    def testSharedCellSharesParameters(self):
        with tf.Graph().as_default():
            shared = rnn_cell.BasicRNNCell(3)
            cell = rnn_cell.StackedCell([shared, shared])
            cell(tf.zeros([2, 3]), cell.zero_state(2, tf.float32))
            self.assertEqual(len(tf.global_variables()), 2)

    def testStateCountMismatch(self):
        with tf.Graph().as_default():
            cell = rnn_cell.StackedCell([rnn_cell.BasicRNNCell(3),
                                         rnn_cell.BasicRNNCell(3)])
            x = tf.zeros([2, 4])
            m = tf.zeros([2, 3])
            with self.assertRaises(ValueError):
                cell(x, (m,))
            with self.assertRaises(ValueError):
                cell(x, (m, m, m))
            self.assertFalse(cell.built)
            self.assertEqual(tf.global_variables(), [])

    def testMismatchedChainedDepths(self):
        with tf.Graph().as_default():
            shared = rnn_cell.BasicRNNCell(4)
            cell = rnn_cell.StackedCell([shared, shared])
            # The second position sees inputs of depth 4, the first of depth 3.
            with self.assertRaises(ValueError):
                cell.create_cell(Mode.TRAINING, [None, 3])

    def testConstructionValidation(self):
        with self.assertRaises(ValueError):
            rnn_cell.StackedCell([])
        with self.assertRaises(TypeError):
            rnn_cell.StackedCell([rnn_cell.BasicRNNCell(2), "cell"])


if __name__ == "__main__":
    tf.test.main()
