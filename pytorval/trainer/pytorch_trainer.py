import abc
from typing import Dict, List, Optional, Sequence

import mlflow
import torch
from loguru import logger

from pytorval.metrics import InvalidArgumentError, Loss, LossResult, Metric, ValidationResult


class PytorchTrainer:
    """
    Minimal training loop scored with validation metrics.

    Subclasses provide the data loaders, the model and the objective, and set
    `n_epochs` and `learning_rate`. Each validation batch is scored by every
    metric and the per-batch results are combined into one running result
    per metric.
    """

    n_epochs = 1
    learning_rate = 1e-3

    def __init__(self, validation_methods: Optional[Sequence[Metric]] = None):

        # device
        self.device = self.get_device()

        # create loaders / model / optimizer / objective / metrics
        self.loader_train, self.loader_val = self.create_data_loader()
        self.model = self.create_model()
        self.model = self.model.to(self.device)
        self.optimizer = self.get_optimizer(learning_rate=self.learning_rate)
        self.objective = self.get_objective()
        self.validation_methods = self.get_validation_methods(validation_methods or [])

        self.history: List[Dict[str, ValidationResult]] = []

    def get_device(self):
        # GPU if available
        device = torch.device('cuda' if torch.cuda.is_available() else 'cpu')
        logger.info(f'Using device: {device}')
        return device

    @abc.abstractmethod
    def create_data_loader(self):
        """
        loader_train = DataLoader(train_dataset, batch_size=self.batch_size, shuffle=True)
        loader_val = DataLoader(val_dataset, batch_size=self.batch_size)

        return loader_train, loader_val
        """
        pass

    @abc.abstractmethod
    def create_model(self):
        """
        model = someModel(params...)
        return model
        """
        pass

    def get_optimizer(self, learning_rate=1e-3):
        optimizer = torch.optim.Adam(self.model.parameters(), lr=learning_rate)
        return optimizer

    @abc.abstractmethod
    def get_objective(self):
        """
        objective = someLossFunction()
        return objective
        """
        pass

    def get_validation_methods(self, methods: Sequence[Metric]) -> List[Metric]:
        # every run reports its objective on the validation set
        out = list(methods)
        if not any(isinstance(m, Loss) for m in out):
            out.append(Loss(criterion=self.objective))
        # results are keyed by name
        names = [m.name for m in out]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise InvalidArgumentError(f"validation method names must be unique, got duplicates {duplicates}")
        return out

    def validate(self, epoch: Optional[int] = None) -> Dict[str, ValidationResult]:
        """Score the validation loader with every validation method."""
        self.model.eval()
        totals: Dict[str, ValidationResult] = {}
        with torch.no_grad():
            for inputs, targets in self.loader_val:
                inputs, targets = inputs.to(self.device), targets.to(self.device)
                outputs = self.model(inputs)
                for method in self.validation_methods:
                    batch_result = method.apply(outputs, targets)
                    if method.name in totals:
                        totals[method.name].combine(batch_result)
                    else:
                        totals[method.name] = batch_result

        for name, total in totals.items():
            logger.info(f'{name} is {total}')
        self.log_results(totals, epoch)
        return totals

    def log_results(self, results: Dict[str, ValidationResult], epoch: Optional[int] = None):
        """Send validation scores to the active mlflow run, if any."""
        if mlflow.active_run() is None:
            return
        for name, total in results.items():
            if isinstance(total, LossResult):
                value = total.average()
            else:
                value, _ = total.result()
            mlflow.log_metric(name, value, step=epoch)

    def fit(self) -> List[Dict[str, ValidationResult]]:

        for epoch in range(self.n_epochs):
            self.model.train()
            train_loss = None
            for inputs, targets in self.loader_train:
                inputs, targets = inputs.to(self.device), targets.to(self.device)

                self.optimizer.zero_grad()
                outputs = self.model(inputs)
                loss = self.objective(outputs, targets)
                loss.backward()
                self.optimizer.step()

                batch_loss = LossResult(loss.item(), 1)
                train_loss = batch_loss if train_loss is None else train_loss.combine(batch_loss)

            if train_loss is not None:
                logger.info(f'Epoch {epoch+1}, training loss: {train_loss.average():.4f}')

            if self.loader_val is not None:
                self.history.append(self.validate(epoch))

        return self.history
