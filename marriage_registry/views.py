from rest_framework.views import APIView
from rest_framework.response import Response


class ApiHomeView(APIView):
    authentication_classes = []
    permission_classes = []

    def get(self, request):
        return Response(
            {
                "message": "Marriage Registry Workflow API",
                "endpoints": {
                    "admin": "/admin/",
                    "token_obtain": "/api/token/",
                    "token_refresh": "/api/token/refresh/",
                    "schema": "/api/schema/",
                    "swagger": "/api/schema/swagger-ui/",
                    "redoc": "/api/schema/redoc/",
                    "health": "/registry/health/",
                    "workflow": "/registry/workflow/",
                    "submission": "/registry/submissions/<id>/",
                    "queue": "/registry/queue/",
                    "my_work": "/registry/my-work/",
                    "history": "/registry/history/",
                    "reports": "/registry/reports/",
                    "ledger": "/registry/ledger/",
                },
            }
        )
