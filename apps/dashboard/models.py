"""
Dashboard 앱은 자체 모델을 가지지 않습니다.
기존 모델(Transaction, Category, Budget)의 데이터를 집계합니다.

주요 기능:
- 기간별 수입/지출 요약 (전체, 월간, 연간)
- 카테고리별 지출 분석
- 예산 대비 사용 현황
- Chart.js 용 차트 데이터

모든 데이터는 Django ORM 집계 함수를 사용하여 utils.py / charts.py 에서 계산됩니다.
"""
