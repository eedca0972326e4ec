"""Worker 모듈 - employee 프로세스와 잡 타입 레지스트리"""
