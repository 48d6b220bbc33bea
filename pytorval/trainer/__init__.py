from pytorval.trainer.pytorch_trainer import PytorchTrainer
