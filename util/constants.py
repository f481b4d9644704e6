class ExternalURIs:
    API = "/api"
    V2 = API + "/v2"
    START_PROCESS = V2 + "/process/{project}/start"


class Headers:
    CONTENT_LOCATION = "Content-Location"


COMPLETED_PHASE = "COMPLETED"
TIMESTAMP_FIELDS = ("createdAt", "finishedAt")
TIMESTAMP_PARTS = 7
