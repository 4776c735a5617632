"""Main rnnflow module."""
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

import tensorflow as _tf

from rnnflow.modes import Mode
from rnnflow.rnn_cell import BasicLSTMCell, BasicRNNCell, DropoutWrapper, GRUCell
from rnnflow.rnn_cell import LSTMState, RNNCell, StackedCell, Tuple
from rnnflow.layers import BidirectionalRNN, Layer, RNN
from rnnflow import ops


__version__ = "0.1.0"

if int(_tf.__version__.split(".")[0]) < 2:
    raise ImportError("Your tensorflow version needs to be at least 2.0.")
