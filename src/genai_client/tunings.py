"""
Tuning jobs API.

Vertex AI exposes tuning jobs directly. The Gemini API exposes tuned models,
which are mapped onto TuningJob here so both backends list the same type.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from genai_client import _transformers as t
from genai_client.errors import InvalidArgumentError
from genai_client.pagers import ListConfig, PagedItem, Pager, as_list_config
from genai_client.transport.http import HttpClient
from genai_client.types import CreateTuningJobConfig, TuningDataset, TuningJob

# Gemini API tuned model state -> tuning job state.
_TUNED_MODEL_STATES = {
    "STATE_UNSPECIFIED": "JOB_STATE_UNSPECIFIED",
    "CREATING": "JOB_STATE_RUNNING",
    "ACTIVE": "JOB_STATE_SUCCEEDED",
    "FAILED": "JOB_STATE_FAILED",
}


def _job_from_tuned_model(data: dict[str, Any]) -> TuningJob:
    name = data.get("name")
    return TuningJob(
        name=name,
        state=_TUNED_MODEL_STATES.get(data.get("state", ""), data.get("state")),
        create_time=data.get("createTime"),
        update_time=data.get("updateTime"),
        description=data.get("description"),
        base_model=data.get("baseModel"),
        tuned_model_display_name=data.get("displayName"),
        tuned_model={"model": name, "endpoint": name},
    )


class Tunings:
    def __init__(self, http: HttpClient):
        self._http = http

    @property
    def _vertexai(self) -> bool:
        return self._http.config.vertexai

    async def get(self, name: str) -> TuningJob:
        if self._vertexai:
            data = await self._http.get(t.t_resource_name(self._http.config, "tuningJobs", name))
            return TuningJob.model_validate(data)
        data = await self._http.get(t.t_resource_name(self._http.config, "tunedModels", name))
        return _job_from_tuned_model(data)

    async def _list_page(self, params: ListConfig) -> dict[str, Any]:
        query = {"pageSize": params.page_size, "pageToken": params.page_token, "filter": params.filter}
        if self._vertexai:
            data = await self._http.get("tuningJobs", params=query)
            jobs = [TuningJob.model_validate(j) for j in data.get("tuningJobs") or []]
        else:
            data = await self._http.get("tunedModels", params=query)
            jobs = [_job_from_tuned_model(m) for m in data.get("tunedModels") or []]
        return {"nextPageToken": data.get("nextPageToken"), PagedItem.TUNING_JOBS.value: jobs}

    async def list(self, config: Optional[Union[ListConfig, dict[str, Any]]] = None) -> Pager[TuningJob]:
        params = as_list_config(config)
        return Pager(PagedItem.TUNING_JOBS, self._list_page, await self._list_page(params), params)

    async def tune(
        self,
        base_model: str,
        training_dataset: Union[TuningDataset, dict[str, Any]],
        config: Optional[Union[CreateTuningJobConfig, dict[str, Any]]] = None,
    ) -> TuningJob:
        """Start a supervised tuning job."""
        if isinstance(training_dataset, dict):
            training_dataset = TuningDataset.model_validate(training_dataset)
        if isinstance(config, dict):
            config = CreateTuningJobConfig.model_validate(config)
        config = config or CreateTuningJobConfig()
        if self._vertexai:
            return await self._tune_vertex(base_model, training_dataset, config)
        return await self._tune_gemini(base_model, training_dataset, config)

    async def _tune_vertex(self, base_model: str, dataset: TuningDataset, config: CreateTuningJobConfig) -> TuningJob:
        if not dataset.gcs_uri:
            raise InvalidArgumentError("Vertex AI tuning requires training_dataset.gcs_uri")
        if dataset.examples:
            raise InvalidArgumentError("Inline examples are not supported by Vertex AI tuning")
        spec: dict[str, Any] = {"trainingDatasetUri": dataset.gcs_uri}
        if config.validation_dataset_uri:
            spec["validationDatasetUri"] = config.validation_dataset_uri
        hyper = {
            k: v for k, v in {
                "epochCount": config.epoch_count,
                "learningRateMultiplier": config.learning_rate_multiplier,
                "adapterSize": config.adapter_size,
            }.items() if v is not None
        }
        if hyper:
            spec["hyperParameters"] = hyper
        body: dict[str, Any] = {"baseModel": base_model, "supervisedTuningSpec": spec}
        if config.tuned_model_display_name:
            body["tunedModelDisplayName"] = config.tuned_model_display_name
        if config.description:
            body["description"] = config.description
        return TuningJob.model_validate(await self._http.post("tuningJobs", body))

    async def _tune_gemini(self, base_model: str, dataset: TuningDataset, config: CreateTuningJobConfig) -> TuningJob:
        if dataset.gcs_uri:
            raise InvalidArgumentError("gcs_uri is not supported by Gemini API tuning; pass examples")
        if not dataset.examples:
            raise InvalidArgumentError("Gemini API tuning requires training_dataset.examples")
        task: dict[str, Any] = {
            "trainingData": {"examples": {"examples": [e.to_wire() for e in dataset.examples]}},
        }
        hyper = {
            k: v for k, v in {
                "epochCount": config.epoch_count,
                "learningRate": config.learning_rate,
                "batchSize": config.batch_size,
            }.items() if v is not None
        }
        if hyper:
            task["hyperparameters"] = hyper
        body: dict[str, Any] = {"baseModel": t.t_model(self._http.config, base_model), "tuningTask": task}
        if config.tuned_model_display_name:
            body["displayName"] = config.tuned_model_display_name
        if config.description:
            body["description"] = config.description
        operation = await self._http.post("tunedModels", body)
        # The Gemini API answers with a long-running operation naming the tuned model.
        metadata = operation.get("metadata") or {}
        return TuningJob(
            name=metadata.get("tunedModel") or operation.get("name"),
            state="JOB_STATE_QUEUED",
            base_model=body["baseModel"],
            tuned_model_display_name=config.tuned_model_display_name,
            description=config.description,
        )
