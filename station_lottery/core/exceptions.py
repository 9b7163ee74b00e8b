# custom exception 정의 및 관리
# 추첨 소진(Exhausted)은 정상 결과이므로 예외로 정의하지 않음


class StationLotteryException(Exception):  # 예외 구조 정의
    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class DepartureUnresolvedException(StationLotteryException):
    def __init__(self, message: str = "출발역 좌표를 확인할 수 없습니다"):
        super().__init__(message, code="DEPARTURE_UNRESOLVED")


class EmptyCandidateSetException(StationLotteryException):
    def __init__(self, message: str = "추첨 가능한 역이 없습니다"):
        super().__init__(message, code="EMPTY_CANDIDATE_SET")


class ProviderUnavailableException(StationLotteryException):
    def __init__(self, message: str = "역 데이터 제공자에 연결할 수 없습니다"):
        super().__init__(message, code="PROVIDER_UNAVAILABLE")


class InvalidRegionException(StationLotteryException):
    def __init__(self, message: str = "알 수 없는 지역입니다"):
        super().__init__(message, code="INVALID_REGION")
