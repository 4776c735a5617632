"""Execution modes for cells and layers."""
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


class Mode(object):
    """Modes a model graph can be built for.

    Cells and layers receive the mode when they are created, so that
    behavior that only makes sense while learning (e.g. dropout) can be
    switched off for evaluation and inference graphs.
    """

    TRAINING = "train"
    EVALUATION = "eval"
    INFERENCE = "infer"

    ALL = (TRAINING, EVALUATION, INFERENCE)

    @staticmethod
    def is_training(mode):
        return mode == Mode.TRAINING

    @staticmethod
    def validate(mode):
        """Returns `mode` if it is a known mode.

        Raises:
            ValueError: if `mode` is not one of `Mode.ALL`.
        """
        if mode not in Mode.ALL:
            raise ValueError("Unknown mode {0!r}, expected one of {1}.".format(
                mode, Mode.ALL))
        return mode
